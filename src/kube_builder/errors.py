"""Error values recorded by the Deployment builder."""
from typing import Optional


class BuilderError(Exception):
    """Base class for every error the builder records."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(BuilderError):
    """A required field is missing or a value is outside its legal range."""


class MappingError(BuilderError):
    """Converting caller input into descriptor fragments failed."""

    def __init__(self, message: str, cause: Optional[Exception] = None, field: Optional[str] = None):
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(detail, field)
        self.cause = cause


class DecodeError(BuilderError):
    """A JSON or YAML buffer could not be decoded into a Deployment."""

    def __init__(self, fmt: str, cause: Exception):
        super().__init__(f"{fmt} decode error: {cause}")
        self.fmt = fmt
        self.cause = cause
