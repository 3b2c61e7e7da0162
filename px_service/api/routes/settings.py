"""
Profile and settings routes
"""
from fastapi import APIRouter, Depends

from ...domain.models import ThemePreference, UserProfile
from ...schemas import (
    AccessibilitySettingsResponse,
    HeadingResponse,
    ProfileSettingsResponse,
    ThemeConfigResponse,
    ThemeUpdate,
    UserProfileResponse,
)
from ...application.services import ThemeService
from ..dependencies import get_current_profile, get_theme_service


router = APIRouter(prefix="/api/v1", tags=["Settings"])


def theme_config(preference: ThemePreference) -> ThemeConfigResponse:
    return ThemeConfigResponse(current=preference.theme, options=ThemeService.options())


@router.get("/profiles/me", response_model=UserProfileResponse)
async def get_my_profile(profile: UserProfile = Depends(get_current_profile)):
    """
    Get current user's profile

    Requires authentication.
    """
    return UserProfileResponse.model_validate(profile)


@router.get("/settings/accessibility", response_model=AccessibilitySettingsResponse)
async def get_accessibility_settings(
    profile: UserProfile = Depends(get_current_profile),
    theme_service: ThemeService = Depends(get_theme_service)
):
    """Accessibility settings page: the theme section"""
    preference = await theme_service.get_theme(profile)
    return AccessibilitySettingsResponse(
        heading=HeadingResponse(text="Theme", level=6),
        theme=theme_config(preference)
    )


@router.get("/settings/profile", response_model=ProfileSettingsResponse)
async def get_profile_settings(
    profile: UserProfile = Depends(get_current_profile),
    theme_service: ThemeService = Depends(get_theme_service)
):
    """Profile settings page: profile details plus the theme section"""
    preference = await theme_service.get_theme(profile)
    return ProfileSettingsResponse(
        profile=UserProfileResponse.model_validate(profile),
        theme=theme_config(preference)
    )


@router.put("/settings/theme", response_model=ThemeConfigResponse)
async def update_theme(
    theme_data: ThemeUpdate,
    profile: UserProfile = Depends(get_current_profile),
    theme_service: ThemeService = Depends(get_theme_service)
):
    """
    Update current user's theme

    - **theme**: light, dark or system
    """
    preference = await theme_service.update_theme(profile, theme_data.theme)
    return theme_config(preference)
