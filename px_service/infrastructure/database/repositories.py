"""
Repository implementations - Data access layer
"""
from typing import List, Optional
import asyncpg
import logging

from ...domain.models import Post, Theme, ThemePreference, UserProfile
from ...domain.repositories import IPostRepository, IProfileRepository, IThemeRepository
from ...exceptions import PersistenceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

POST_COLUMNS = "id, title, asset_url, profile_id, user_id, created_at"


class PostRepository(IPostRepository):
    """Post repository implementation using PostgreSQL"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_post(self, row: Optional[asyncpg.Record]) -> Optional[Post]:
        """Convert database row to Post model"""
        if not row:
            return None
        return Post(**dict(row))

    async def create(
        self,
        asset_url: str,
        title: str,
        profile_id: int,
        user_id: str
    ) -> Post:
        """Create a new post record"""
        try:
            row = await self.db.fetch_one(
                f"""
                INSERT INTO posts (asset_url, title, profile_id, user_id)
                VALUES ($1, $2, $3, $4)
                RETURNING {POST_COLUMNS}
                """,
                asset_url, title, profile_id, user_id
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to insert post for profile {profile_id}: {e}")
            raise PersistenceError(str(e)) from e

        if not row:
            raise PersistenceError("Insert returned no row")
        return self._row_to_post(row)

    async def find_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID"""
        row = await self.db.fetch_one(
            f"SELECT {POST_COLUMNS} FROM posts WHERE id = $1",
            post_id
        )
        return self._row_to_post(row)

    async def find_page(
        self,
        limit: int = 20,
        offset: int = 0,
        profile_id: Optional[int] = None
    ) -> List[Post]:
        """Find a page of posts, newest first"""
        if profile_id is None:
            rows = await self.db.fetch_all(
                f"""
                SELECT {POST_COLUMNS}
                FROM posts
                ORDER BY created_at DESC, id DESC
                LIMIT $1 OFFSET $2
                """,
                limit, offset
            )
        else:
            rows = await self.db.fetch_all(
                f"""
                SELECT {POST_COLUMNS}
                FROM posts
                WHERE profile_id = $1
                ORDER BY created_at DESC, id DESC
                LIMIT $2 OFFSET $3
                """,
                profile_id, limit, offset
            )
        return [self._row_to_post(row) for row in rows]

    async def count(self, profile_id: Optional[int] = None) -> int:
        """Count posts"""
        if profile_id is None:
            return await self.db.fetch_value("SELECT COUNT(*) FROM posts")
        return await self.db.fetch_value(
            "SELECT COUNT(*) FROM posts WHERE profile_id = $1",
            profile_id
        )


class ProfileRepository(IProfileRepository):
    """Profile repository implementation using PostgreSQL"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    async def find_by_user_id(self, user_id: str) -> Optional[UserProfile]:
        """Find the profile owned by an auth user"""
        row = await self.db.fetch_one(
            """
            SELECT id, user_id, name, username, avatar_url
            FROM profiles
            WHERE user_id = $1
            """,
            user_id
        )
        if not row:
            return None
        return UserProfile(**dict(row))


class ThemeRepository(IThemeRepository):
    """Theme preference repository implementation using PostgreSQL"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    async def find_by_profile_id(self, profile_id: int) -> Optional[ThemePreference]:
        """Find theme preference for a profile"""
        row = await self.db.fetch_one(
            "SELECT profile_id, theme FROM profile_settings WHERE profile_id = $1",
            profile_id
        )
        if not row:
            return None
        return ThemePreference(profile_id=row["profile_id"], theme=Theme(row["theme"]))

    async def upsert(self, profile_id: int, theme: Theme) -> ThemePreference:
        """Create or replace theme preference for a profile"""
        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO profile_settings (profile_id, theme)
                VALUES ($1, $2)
                ON CONFLICT (profile_id)
                DO UPDATE SET theme = EXCLUDED.theme, updated_at = NOW()
                RETURNING profile_id, theme
                """,
                profile_id, theme.value
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to save theme for profile {profile_id}: {e}")
            raise PersistenceError(str(e)) from e
        return ThemePreference(profile_id=row["profile_id"], theme=Theme(row["theme"]))
