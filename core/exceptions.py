"""
HRMS client exceptions.

Custom exception classes for errors raised while talking to the HRMS
backend or while validating a schedule action before dispatch.
"""

from typing import Optional


class HrmsError(Exception):
    """Base exception for HRMS-related errors."""
    pass


class HrmsConnectionError(HrmsError):
    """Raised when the HRMS backend cannot be reached (transport failure)."""
    pass


class HrmsRequestError(HrmsError):
    """
    Raised when the HRMS backend answers with a non-2xx status.

    The message is the server's ``error`` (or ``message``) field when the body
    is parseable JSON, otherwise the operation's generic fallback message.
    """

    def __init__(self, message: str, status_code: int, server_message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.server_message = server_message
        super().__init__(message)


class HrmsResponseError(HrmsError):
    """Raised when a 2xx response does not have the expected shape."""
    pass


class ScheduleActionError(HrmsError):
    """
    Raised when a schedule action is rejected before dispatch.

    Examples:
        - Subject or section not yet mirrored into HRMS
        - Restore requested without an original teacher on record
    """
    pass
