"""
Exceptions raised by the composer and its collaborators
"""
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class FieldError:
    """A single form field error"""
    type: str
    message: str
    hint: Optional[str] = None


class PXError(Exception):
    """Base class for PX Service errors"""


class ComposerValidationError(PXError):
    """Raised when the composer form does not pass local validation"""

    def __init__(self, errors: Dict[str, FieldError]):
        self.errors = errors
        super().__init__(f"Invalid composer fields: {', '.join(sorted(errors))}")


class ImageEncodeError(PXError):
    """Raised when an image cannot be turned into a data URL"""


class UploadError(PXError):
    """Raised when the upload endpoint does not return an asset URL"""


class PersistenceError(PXError):
    """Raised when the database rejects a write"""
