"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Post, Theme, ThemePreference, UserProfile


class IPostRepository(ABC):
    """Post repository interface"""

    @abstractmethod
    async def create(
        self,
        asset_url: str,
        title: str,
        profile_id: int,
        user_id: str
    ) -> Post:
        """Create a new post record"""
        pass

    @abstractmethod
    async def find_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID"""
        pass

    @abstractmethod
    async def find_page(
        self,
        limit: int = 20,
        offset: int = 0,
        profile_id: Optional[int] = None
    ) -> List[Post]:
        """Find a page of posts, newest first"""
        pass

    @abstractmethod
    async def count(self, profile_id: Optional[int] = None) -> int:
        """Count posts"""
        pass


class IProfileRepository(ABC):
    """Profile repository interface"""

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> Optional[UserProfile]:
        """Find the profile owned by an auth user"""
        pass


class IThemeRepository(ABC):
    """Theme preference repository interface"""

    @abstractmethod
    async def find_by_profile_id(self, profile_id: int) -> Optional[ThemePreference]:
        """Find theme preference for a profile"""
        pass

    @abstractmethod
    async def upsert(self, profile_id: int, theme: Theme) -> ThemePreference:
        """Create or replace theme preference for a profile"""
        pass
