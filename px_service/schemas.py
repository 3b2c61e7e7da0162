"""
Pydantic schemas for PX Service
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from .domain.models import Theme


# User schema (from auth token)
class User(BaseModel):
    """Authenticated user"""
    id: str
    email: Optional[str] = None


# Posts
class PostResponse(BaseModel):
    """Post response"""
    id: int
    title: str
    asset_url: str
    profile_id: int
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PostTileResponse(BaseModel):
    """Posts grid tile"""
    id: int
    href: str
    src: str
    alt: str

    class Config:
        from_attributes = True


class PostGridResponse(BaseModel):
    """Posts grid page"""
    tiles: List[PostTileResponse]
    total: int
    page: int
    page_size: int
    has_more: bool
    next_page: Optional[int] = None


# Composer
class FieldErrorResponse(BaseModel):
    """Form field error"""
    type: str
    message: str
    hint: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    """Composer validation error"""
    errors: Dict[str, FieldErrorResponse]
    success: bool = False


class SubmissionStateResponse(BaseModel):
    """Outcome of a publish attempt"""
    has_form_been_submitted: bool
    has_submitting_been_succesful: bool
    has_submitting_failed: bool
    error: Optional[str] = None
    post: Optional[PostResponse] = None
    refresh: bool = False


class ImagePreviewResponse(BaseModel):
    """Data URL preview of the selected image"""
    filename: str
    src: str


class AvatarResponse(BaseModel):
    """Avatar image"""
    src: str
    alt: str


class ComposerViewResponse(BaseModel):
    """Composer header"""
    avatar: Optional[AvatarResponse] = None
    title_placeholder: str
    title_max_length: int


# Profiles and settings
class UserProfileResponse(BaseModel):
    """User profile response"""
    id: int
    user_id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class ThemeConfigResponse(BaseModel):
    """Theme configuration"""
    current: Theme
    options: List[Theme]


class ThemeUpdate(BaseModel):
    """Theme update request"""
    theme: Theme


class HeadingResponse(BaseModel):
    """Section heading"""
    text: str
    level: int = Field(6, ge=1, le=6)


class AccessibilitySettingsResponse(BaseModel):
    """Accessibility settings page"""
    heading: HeadingResponse
    theme: ThemeConfigResponse


class ProfileSettingsResponse(BaseModel):
    """Profile settings page"""
    profile: UserProfileResponse
    theme: ThemeConfigResponse

