"""
Errors raised by the variant pipeline.
"""

from typing import Optional


class VariantError(Exception):
    """
    Base class for pipeline errors.

    Attributes:
        path: Path of the file the error relates to, if any
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ConfigurationInvalid(VariantError):
    """Catalog or pipeline configuration is unusable. Fatal at startup."""

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class SourceNotFound(VariantError):
    """Source image does not exist or is not a regular file."""


class DecodeFailure(VariantError):
    """Source image is corrupt or in an unsupported format."""


class EncodeFailure(VariantError):
    """A variant could not be encoded into the delivery format."""


class OutputWriteFailure(VariantError):
    """A variant could not be written (includes directory creation)."""
