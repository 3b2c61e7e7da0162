"""
Application services - Business logic layer
"""
from typing import List, Optional, Tuple
from fastapi import HTTPException, status
import logging

from ..config import settings
from ..domain.models import Post, Theme, ThemePreference, UserProfile
from ..domain.repositories import IPostRepository, IProfileRepository, IThemeRepository
from ..exceptions import PersistenceError
from .grid import PostsGrid

logger = logging.getLogger(__name__)


class PostService:
    """Post service - reads posts for the grid and the detail view"""

    def __init__(self, post_repository: IPostRepository):
        self.post_repo = post_repository

    async def get_post(self, post_id: int) -> Post:
        """Get post by ID"""
        post = await self.post_repo.find_by_id(post_id)
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )
        return post

    async def grid_page(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        profile_id: Optional[int] = None
    ) -> Tuple[PostsGrid, int, bool]:
        """
        Build the posts grid for one page

        The grid's fetch-more capability loads the pages that follow.

        Returns:
            Tuple of (grid, total_count, has_more)
        """
        page_size = page_size or settings.DEFAULT_PAGE_SIZE
        offset = (page - 1) * page_size

        total = await self.post_repo.count(profile_id)
        posts = await self.post_repo.find_page(page_size, offset, profile_id)
        has_more = (offset + len(posts)) < total

        next_page = page + 1

        async def fetch_next_page() -> List[Post]:
            nonlocal next_page
            more = await self.post_repo.find_page(
                page_size,
                (next_page - 1) * page_size,
                profile_id
            )
            next_page += 1
            return more

        grid = PostsGrid(posts, on_fetch_more=fetch_next_page)
        return grid, total, has_more


class ProfileService:
    """Profile service - resolves the profile behind an auth user"""

    def __init__(self, profile_repository: IProfileRepository):
        self.profile_repo = profile_repository

    async def find_profile(self, user_id: str) -> Optional[UserProfile]:
        return await self.profile_repo.find_by_user_id(user_id)

    async def get_profile(self, user_id: str) -> UserProfile:
        """Get the profile of an auth user"""
        profile = await self.find_profile(user_id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found"
            )
        return profile


class ThemeService:
    """Theme service - backs the theme configuration on the settings pages"""

    def __init__(self, theme_repository: IThemeRepository):
        self.theme_repo = theme_repository

    @staticmethod
    def options() -> List[Theme]:
        return list(Theme)

    async def get_theme(self, profile: UserProfile) -> ThemePreference:
        """Get theme preference, falling back to the configured default"""
        preference = await self.theme_repo.find_by_profile_id(profile.id)
        if preference:
            return preference
        return ThemePreference(profile_id=profile.id, theme=Theme(settings.DEFAULT_THEME))

    async def update_theme(self, profile: UserProfile, theme: Theme) -> ThemePreference:
        """Save theme preference"""
        try:
            preference = await self.theme_repo.upsert(profile.id, theme)
        except PersistenceError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save theme"
            )
        logger.info(f"Theme for profile {profile.id} set to {preference.theme.value}")
        return preference
