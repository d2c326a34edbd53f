class CcdccError(Exception):
    """Base class for the errors raised by ccdcc commands."""


class ValidationError(CcdccError):
    """The user input (prompt, format, limits) cannot be turned into a request."""


class UnsupportedFormatError(ValidationError):
    def __init__(self, format: str):
        super().__init__(f"Unsupported format: {format}")
        self.format = format


class AccessError(CcdccError):
    """A document or directory could not be read."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Error accessing {path}: {cause}")
        self.path = path
        self.cause = cause


class GenerationFailure(CcdccError):
    """The exchange finished without a successful result to persist."""


class WriteError(CcdccError):
    """A generated document could not be written to disk."""
