"""Request validation exceptions."""


class ValidationError(ValueError):
    """Raised when a tool argument is missing or invalid."""

    pass
