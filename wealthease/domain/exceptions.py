"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    status_code = 500


class ServiceError(DomainException):
    """Unexpected failure; details are only shown outside production"""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.details = details


class InvalidInputError(DomainException):
    """Request data is missing or unusable"""

    status_code = 400


class RateLimitExceededError(DomainException):
    """Client exceeded its request budget for the current window"""

    status_code = 429


class TransactionNotFoundError(DomainException):
    """Transaction id is not present in the user's store"""

    status_code = 404


class LLMError(DomainException):
    """Base exception for language model failures"""

    pass


class LLMNotConfiguredError(LLMError):
    """No API key available for the language model"""

    def __init__(self, message: str = "OpenAI API key not configured"):
        super().__init__(message)


class LLMQuotaExceededError(LLMError):
    """Upstream rate limit or quota exhausted"""

    status_code = 429

    def __init__(self, message: str = "OpenAI API quota exceeded. Please try again later."):
        super().__init__(message)


class LLMAuthenticationError(LLMError):
    """Upstream rejected our credentials"""

    status_code = 401

    def __init__(self, message: str = "Invalid OpenAI API key"):
        super().__init__(message)


class LLMServiceError(LLMError):
    """Upstream unavailable, timed out, or returned an unexpected error"""

    pass
