"""Google authentication and API exceptions."""


class GoogleAuthError(Exception):
    """Base exception for Google authentication errors."""

    pass


class ConfigurationError(GoogleAuthError):
    """Raised when a required environment variable is missing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing env {name}")


class TokenError(GoogleAuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class RemoteApiError(GoogleAuthError):
    """Raised when a Google API call fails."""

    def __init__(self, status: int | None, message: str):
        self.status = status
        self.message = message
        super().__init__(f"HttpError {status}: {message}")
