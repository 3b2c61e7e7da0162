"""
Post composer - collects a title and one image and publishes them as a post
"""
from typing import Awaitable, Callable, Dict, Optional, Sequence
import logging

from ..config import settings
from ..domain.models import Post, SelectedImage, SubmissionState, UserProfile
from ..domain.repositories import IPostRepository
from ..exceptions import (
    ComposerValidationError,
    FieldError,
    ImageEncodeError,
    PersistenceError,
    UploadError,
)
from ..infrastructure.image_encoder import ImageEncoder, read_as_data_url
from ..infrastructure.upload_client import UploadClient

logger = logging.getLogger(__name__)

PUBLISH_FAILED_MESSAGE = "There has been an error trying to publish your post"

Refresh = Callable[[], Awaitable[None]]


class PostComposer:
    """
    Form state and submit handler for a new post.

    Publishing runs encode, upload and insert one after another. Any failure
    marks the attempt as failed and keeps the form as it was; success clears
    the image and title and asks the view to refresh. Nothing is retried and
    an asset uploaded before a failed insert is not removed.
    """

    def __init__(
        self,
        encoder: ImageEncoder,
        uploader: UploadClient,
        post_repository: IPostRepository,
        refresh: Optional[Refresh] = None,
        title_max_length: Optional[int] = None
    ):
        self.encoder = encoder
        self.uploader = uploader
        self.post_repo = post_repository
        self.refresh = refresh
        self.title_max_length = (
            title_max_length if title_max_length is not None else settings.TITLE_MAX_LENGTH
        )

        self.title: Optional[str] = None
        self.image: Optional[SelectedImage] = None
        self.image_preview: Optional[str] = None
        self.state = SubmissionState()
        self.error_message: Optional[str] = None
        self.last_post: Optional[Post] = None
        self.is_submitting = False

    def set_title(self, title: Optional[str]) -> None:
        self.title = title

    def select_images(self, files: Sequence[SelectedImage]) -> bool:
        """
        Pick the image to publish

        Only a single file is accepted; any other count leaves the current
        selection untouched.

        Returns:
            True if the selection changed
        """
        if len(files) != 1:
            return False

        self.image = files[0]
        self.image_preview = read_as_data_url(self.image)
        return True

    def unselect_image(self) -> None:
        self.image = None
        self.image_preview = None

    def validate(self) -> Dict[str, FieldError]:
        """Check required fields and the title length"""
        errors: Dict[str, FieldError] = {}

        if not self.title:
            errors["title"] = FieldError(type="required", message="Title is required")
        elif len(self.title) > self.title_max_length:
            errors["title"] = FieldError(
                type="maxLength",
                message=f"Max title characters is {self.title_max_length}",
                hint=f"{len(self.title)} of {self.title_max_length} characters"
            )

        if not self.image:
            errors["media"] = FieldError(type="required", message="Image/Gif is required")

        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    @property
    def can_submit(self) -> bool:
        return self.is_valid and not self.is_submitting

    async def publish(self, profile: Optional[UserProfile]) -> SubmissionState:
        """
        Publish the current title and image as a post owned by ``profile``

        Raises:
            ComposerValidationError: If required fields are missing or the
                title is too long. No network call is made in that case.
        """
        if not profile:
            logger.warning("Publish requested without a user profile")
            return self.state

        errors = self.validate()
        if errors:
            raise ComposerValidationError(errors)

        self.is_submitting = True
        try:
            try:
                post = await self._run_publish(profile)
            except (ImageEncodeError, UploadError, PersistenceError) as e:
                logger.error(f"Failed to publish post for profile {profile.id}: {e}")
                self.state = SubmissionState.failed()
                self.error_message = PUBLISH_FAILED_MESSAGE
                return self.state

            self.state = SubmissionState.succeeded()
            self.error_message = None
            self.last_post = post
            self.unselect_image()
            self.title = None
            logger.info(f"Published post {post.id} for profile {profile.id}")

            if self.refresh:
                await self.refresh()
            return self.state
        finally:
            self.is_submitting = False

    async def _run_publish(self, profile: UserProfile) -> Post:
        encoded_image = await self.encoder.encode(self.image)
        if not encoded_image:
            raise ImageEncodeError("No encoded image")

        result = await self.uploader.post_image(encoded_image)
        if result.error or not result.asset_secure_url:
            raise UploadError(result.error or "There is no asset URL in the upload response")

        try:
            return await self.post_repo.create(
                asset_url=result.asset_secure_url,
                title=self.title,
                profile_id=profile.id,
                user_id=profile.user_id
            )
        except PersistenceError:
            logger.warning(f"Uploaded asset {result.asset_secure_url} is not linked to any post")
            raise
