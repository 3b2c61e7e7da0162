"""
Domain models - Core business entities
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Theme(str, Enum):
    """Theme enumeration"""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass
class Post:
    """Post domain model"""
    id: int
    title: str
    asset_url: str
    profile_id: int
    user_id: str
    created_at: Optional[datetime] = None


@dataclass
class UserProfile:
    """User profile domain model"""
    id: int
    user_id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Username if set, otherwise name, otherwise empty"""
        if self.username is not None:
            return self.username
        if self.name is not None:
            return self.name
        return ""


@dataclass
class ThemePreference:
    """Theme preference of a profile"""
    profile_id: int
    theme: Theme = Theme.SYSTEM


@dataclass
class SelectedImage:
    """Image picked in the composer"""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class SubmissionState:
    """Outcome of the most recent publish attempt"""
    has_form_been_submitted: bool = False
    has_submitting_been_succesful: bool = False
    has_submitting_failed: bool = False

    @classmethod
    def succeeded(cls) -> "SubmissionState":
        return cls(
            has_form_been_submitted=True,
            has_submitting_been_succesful=True,
            has_submitting_failed=False,
        )

    @classmethod
    def failed(cls) -> "SubmissionState":
        return cls(
            has_form_been_submitted=True,
            has_submitting_been_succesful=False,
            has_submitting_failed=True,
        )


@dataclass
class UploadResult:
    """Result of an upload endpoint call"""
    asset_secure_url: Optional[str] = None
    error: Optional[str] = None


@dataclass
class PostTile:
    """A single cell of the posts grid"""
    id: int
    href: str
    src: str
    alt: str
