import time
from typing import Any, Callable

from pydantic import SecretStr

from nft_ticketing.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MASK = '******'
MAX_CONTENT_LENGTH = 600


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    return f'{func.__module__}:{func.__qualname__}'


def get_chain_start_time() -> str:
    """Elapsed seconds since the outermost decorated call of this context began."""
    if call_depth_var.get() <= 1:
        chain_start_time_var.set(time.perf_counter())
        return 'chain:0.000000'
    return f'chain:{time.perf_counter() - chain_start_time_var.get():.6f}'


def reset_call_depth() -> None:
    call_depth_var.set(max(call_depth_var.get() - 1, 0))


def should_mask_keyword(key: Any, value: Any) -> Any:
    if isinstance(key, str) and key.lower() in SENSITIVE_KEYWORDS:
        return MASK
    return value


def mask_sensitive(value: Any) -> Any:
    if isinstance(value, SecretStr):
        return MASK
    return value


def truncate_content(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        text = value
    else:
        text = repr(value)
    if len(text) <= MAX_CONTENT_LENGTH:
        return value
    return f'{text[:MAX_CONTENT_LENGTH]}...<{len(text) - MAX_CONTENT_LENGTH} more>'
