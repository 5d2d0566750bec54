"""
Shared httpx plumbing for collaborator services.

Every request carries an explicit timeout. Transport failures map onto the
service error taxonomy:
- timeout          -> DeadlineExceededError (504)
- connection error -> ServiceUnavailableError (503)
- 404 / 400,422 / 409 / 412 -> NotFound / InvalidArgument / AlreadyExists / FailedPrecondition
- anything else    -> InternalError
"""

import time
from typing import Any, Optional

import httpx
import orjson

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    CustomBaseError,
    DeadlineExceededError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    ServiceUnavailableError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.platform.observability.tracing import inject_trace_context


_STATUS_ERRORS: dict[int, type[CustomBaseError]] = {
    400: InvalidArgumentError,
    404: NotFoundError,
    409: AlreadyExistsError,
    412: FailedPreconditionError,
    422: InvalidArgumentError,
}


class BaseHttpClient:
    service_name = 'collaborator'

    def __init__(
        self,
        *,
        base_url: str,
        default_timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.default_timeout = default_timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=default_timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get('detail') or body.get('message') or body.get('error') or body)
        return str(body)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        timeout: Optional[float] = None,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        started = time.perf_counter()
        result = 'error'
        try:
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=json,
                    params=params,
                    timeout=timeout or self.default_timeout,
                    headers=inject_trace_context(),
                )
            except httpx.TimeoutException:
                result = 'timeout'
                raise DeadlineExceededError(f'{self.service_name} {operation} timed out')
            except httpx.TransportError as e:
                result = 'unavailable'
                raise ServiceUnavailableError(f'{self.service_name} unavailable: {e}')

            if response.is_success:
                result = 'success'
                return orjson.loads(response.content) if response.content else {}

            error_cls = _STATUS_ERRORS.get(response.status_code)
            detail = self._error_detail(response)
            if error_cls is None:
                raise InternalError(
                    f'{self.service_name} {operation} failed ({response.status_code}): {detail}'
                )
            raise error_cls(f'{self.service_name} {operation}: {detail}')
        finally:
            duration = time.perf_counter() - started
            metrics.record_collaborator_call(
                service=self.service_name, operation=operation, result=result, duration=duration
            )
            Logger.base.debug(
                f'🌐 [{self.service_name.upper()}] {operation} {method} {path} '
                f'-> {result} in {duration * 1000:.1f}ms'
            )
