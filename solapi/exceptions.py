"""
Custom exception hierarchy for SOLAPI operations.

Exception Hierarchy:
    SolapiError (base)
    ├── SolapiConnectionError   - Network/timeout issues
    ├── SolapiAPIError          - API returned error response
    ├── SolapiDataError         - Invalid response structure
    └── MessageNotReceivedError - Every message of a send was rejected

    ValidationError             - Input validation failed (before any request)
"""
from typing import Any, Dict, List


class SolapiError(Exception):
    """Base exception for all SOLAPI-related errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SolapiConnectionError(SolapiError):
    """
    Network-related errors (timeout, connection refused, etc.).

    Raised by the transport; this library never retries on its own.
    """

    def __init__(self, message: str, details: str = None, retry_after: int = None):
        super().__init__(message, details)
        self.retry_after = retry_after


class SolapiAPIError(SolapiError):
    """
    API returned an error response.

    Check status_code and error_code for specifics.
    """

    def __init__(
        self,
        message: str,
        details: str = None,
        status_code: int = None,
        error_code: str = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.error_code = error_code


class SolapiDataError(SolapiError):
    """
    API response has unexpected structure.

    This indicates a contract violation - the API returned
    data in a format we don't understand.
    """

    def __init__(self, message: str, details: str = None, expected: str = None, got: str = None):
        super().__init__(message, details)
        self.expected = expected
        self.got = got


class MessageNotReceivedError(SolapiError):
    """
    Every message in a send request was rejected by the API.

    Partial failures are not errors; they are reported inside
    the successful response body.
    """

    def __init__(self, failed_message_list: List[Dict[str, Any]]):
        self.failed_message_list = list(failed_message_list)
        super().__init__(
            f"All {len(self.failed_message_list)} messages failed to register"
        )

    @property
    def total_count(self) -> int:
        return len(self.failed_message_list)


class ValidationError(Exception):
    """
    Input validation failed.

    Used for validating caller input before any request is issued.
    """

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"
