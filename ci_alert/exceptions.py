"""ci-alert exception classes."""


class CIAlertError(Exception):
    """Base exception for all ci-alert errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(CIAlertError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(CIAlertError):
    """Raised when the API token is rejected."""

    pass


class AuthorizationError(CIAlertError):
    """Raised when access is denied."""

    pass


class NotFoundError(CIAlertError):
    """Raised when a repository, pull request or ref is not found."""

    pass


class RateLimitedError(CIAlertError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(CIAlertError):
    """Raised on other client errors (4xx)."""

    pass


class ServerError(CIAlertError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class NotificationError(CIAlertError):
    """Raised when the desktop notifier cannot be invoked."""

    def __init__(self, message: str) -> None:
        super().__init__("NOTIFICATION_ERROR", message)


class InvalidResponseError(ServerError):
    """Raised when a successful response cannot be parsed."""

    def __init__(self, message: str, request_id: str | None = None) -> None:
        super().__init__("INVALID_RESPONSE", message, request_id)
