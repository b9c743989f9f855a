from typing import Optional


class AssessmentError(Exception):
    """Base class for errors raised by the assessment service."""


class ConfigurationError(AssessmentError):
    """Deployment misconfiguration. Not retryable until an operator fixes it."""


class ValidationError(AssessmentError, ValueError):
    """Client input that must be corrected before it can be accepted."""


class ApiError(AssessmentError):
    def __init__(self, status_code: int, message: str, code: str, retryable: bool = False, headers: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.retryable = retryable
        self.headers = headers
