"""
FastAPI dependencies
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from typing import Optional

from ..config import settings
from ..domain.models import UserProfile
from ..schemas import User
from ..infrastructure.database.connection import DatabaseConnection, get_db_connection
from ..infrastructure.database.repositories import PostRepository, ProfileRepository, ThemeRepository
from ..infrastructure.image_encoder import ImageEncoder
from ..infrastructure.upload_client import UploadClient, get_upload_client
from ..application.composer import PostComposer
from ..application.services import PostService, ProfileService, ThemeService


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_post_repository(db: DatabaseConnection = Depends(get_db_connection)) -> PostRepository:
    """Get post repository dependency"""
    return PostRepository(db)


async def get_profile_repository(db: DatabaseConnection = Depends(get_db_connection)) -> ProfileRepository:
    """Get profile repository dependency"""
    return ProfileRepository(db)


async def get_theme_repository(db: DatabaseConnection = Depends(get_db_connection)) -> ThemeRepository:
    """Get theme repository dependency"""
    return ThemeRepository(db)


async def get_post_service(post_repo: PostRepository = Depends(get_post_repository)) -> PostService:
    """Get post service dependency"""
    return PostService(post_repo)


async def get_profile_service(
    profile_repo: ProfileRepository = Depends(get_profile_repository)
) -> ProfileService:
    """Get profile service dependency"""
    return ProfileService(profile_repo)


async def get_theme_service(theme_repo: ThemeRepository = Depends(get_theme_repository)) -> ThemeService:
    """Get theme service dependency"""
    return ThemeService(theme_repo)


async def get_image_encoder() -> ImageEncoder:
    """Get image encoder dependency"""
    return ImageEncoder()


async def get_post_composer(
    encoder: ImageEncoder = Depends(get_image_encoder),
    uploader: UploadClient = Depends(get_upload_client),
    post_repo: PostRepository = Depends(get_post_repository)
) -> PostComposer:
    """Get a fresh post composer for the request"""
    return PostComposer(encoder, uploader, post_repo)


def decode_access_token(token: str) -> User:
    """
    Decode a bearer token into the user it was issued for

    Raises:
        HTTPException: If the token is invalid or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return User(id=str(user_id), email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token

    Raises:
        HTTPException: If token is missing or invalid
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return decode_access_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[User]:
    """
    Optional authentication - returns None if no valid token provided
    """
    if not credentials:
        return None

    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        return None


async def get_current_profile(
    current_user: User = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service)
) -> UserProfile:
    """Get the profile of the authenticated user"""
    return await profile_service.get_profile(current_user.id)
