from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_ARGUMENT = 'INVALID_ARGUMENT'
    NOT_FOUND = 'NOT_FOUND'
    ALREADY_EXISTS = 'ALREADY_EXISTS'
    FAILED_PRECONDITION = 'FAILED_PRECONDITION'
    INTERNAL = 'INTERNAL'
    UNAVAILABLE = 'UNAVAILABLE'
    DEADLINE_EXCEEDED = 'DEADLINE_EXCEEDED'


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidArgumentError(CustomBaseError):
    code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class NotFoundError(CustomBaseError):
    code = ErrorCode.NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class AlreadyExistsError(CustomBaseError):
    code = ErrorCode.ALREADY_EXISTS

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class FailedPreconditionError(CustomBaseError):
    code = ErrorCode.FAILED_PRECONDITION

    def __init__(self, message: str) -> None:
        super().__init__(message, 412)


class InternalError(CustomBaseError):
    code = ErrorCode.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class ServiceUnavailableError(CustomBaseError):
    code = ErrorCode.UNAVAILABLE

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class DeadlineExceededError(CustomBaseError):
    code = ErrorCode.DEADLINE_EXCEEDED

    def __init__(self, message: str) -> None:
        super().__init__(message, 504)
