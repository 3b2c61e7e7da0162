"""
Posts grid - turns post records into linked image tiles
"""
from typing import Awaitable, Callable, List, Optional, Sequence
import logging

from ..config import settings
from ..domain.models import Post, PostTile

logger = logging.getLogger(__name__)

FetchMore = Callable[[], Awaitable[Sequence[Post]]]


class PostsGrid:
    """
    Collection of posts rendered as tiles.

    ``on_fetch_more`` is called when the client has scrolled near the last
    tiles; whatever it yields is appended as-is, without dedupe or reordering.
    """

    def __init__(
        self,
        posts: Sequence[Post],
        on_fetch_more: Optional[FetchMore] = None,
        detail_path: Optional[str] = None
    ):
        self.posts: List[Post] = list(posts)
        self.on_fetch_more = on_fetch_more
        self.detail_path = detail_path or settings.POST_DETAIL_PATH

    def __len__(self) -> int:
        return len(self.posts)

    @property
    def can_fetch_more(self) -> bool:
        return self.on_fetch_more is not None

    def tile_for(self, post: Post) -> PostTile:
        return PostTile(
            id=post.id,
            href=self.detail_path.format(post_id=post.id),
            src=post.asset_url,
            alt=post.title
        )

    def tiles(self) -> List[PostTile]:
        return [self.tile_for(post) for post in self.posts]

    async def fetch_more(self) -> List[Post]:
        """
        Load the next posts through ``on_fetch_more``

        Returns:
            The newly appended posts (empty if no fetch capability was given)
        """
        if not self.on_fetch_more:
            return []

        new_posts = list(await self.on_fetch_more())
        self.posts.extend(new_posts)
        logger.debug(f"Grid fetched {len(new_posts)} more posts, {len(self.posts)} total")
        return new_posts
