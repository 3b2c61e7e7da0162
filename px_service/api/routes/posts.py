"""
Post routes - composer, grid and detail view
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from ...config import settings
from ...domain.models import SelectedImage, UserProfile
from ...exceptions import ComposerValidationError
from ...schemas import (
    AvatarResponse,
    ComposerViewResponse,
    FieldErrorResponse,
    ImagePreviewResponse,
    PostGridResponse,
    PostResponse,
    PostTileResponse,
    SubmissionStateResponse,
    User,
    ValidationErrorResponse,
)
from ...application.composer import PostComposer
from ...application.services import PostService, ProfileService
from ..dependencies import (
    get_current_profile,
    get_current_user_optional,
    get_post_composer,
    get_post_service,
    get_profile_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Posts"])


async def read_selected_images(files: Optional[List[UploadFile]]) -> List[SelectedImage]:
    """Read uploaded form files, skipping empty file inputs"""
    images = []
    for file in files or []:
        if not file.filename:
            continue
        images.append(SelectedImage(
            filename=file.filename,
            content=await file.read(),
            content_type=file.content_type
        ))
    return images


def submission_response(composer: PostComposer, refresh: bool) -> SubmissionStateResponse:
    state = composer.state
    post = None
    if state.has_submitting_been_succesful and composer.last_post:
        post = PostResponse.model_validate(composer.last_post)

    return SubmissionStateResponse(
        has_form_been_submitted=state.has_form_been_submitted,
        has_submitting_been_succesful=state.has_submitting_been_succesful,
        has_submitting_failed=state.has_submitting_failed,
        error=composer.error_message,
        post=post,
        refresh=refresh
    )


@router.get("/composer", response_model=ComposerViewResponse)
async def get_composer(
    current_user: Optional[User] = Depends(get_current_user_optional),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """
    Get the composer header

    Shows the current user's avatar when a profile with an avatar exists.
    """
    avatar = None
    if current_user:
        profile = await profile_service.find_profile(current_user.id)
        if profile and profile.avatar_url:
            avatar = AvatarResponse(src=profile.avatar_url, alt=profile.display_name)

    return ComposerViewResponse(
        avatar=avatar,
        title_placeholder=settings.TITLE_PLACEHOLDER,
        title_max_length=settings.TITLE_MAX_LENGTH
    )


@router.post("/composer/preview", response_model=ImagePreviewResponse)
async def preview_image(
    media: Optional[List[UploadFile]] = File(None),
    composer: PostComposer = Depends(get_post_composer)
):
    """
    Preview the selected image

    - **media**: exactly one image file
    """
    images = await read_selected_images(media)
    if not composer.select_images(images):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Select exactly one image"
        )

    return ImagePreviewResponse(filename=composer.image.filename, src=composer.image_preview)


@router.post(
    "/posts",
    response_model=SubmissionStateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationErrorResponse},
        502: {"model": SubmissionStateResponse},
    },
)
async def publish_post(
    title: Optional[str] = Form(None),
    media: Optional[List[UploadFile]] = File(None),
    profile: UserProfile = Depends(get_current_profile),
    composer: PostComposer = Depends(get_post_composer)
):
    """
    Publish a new post

    - **title**: Post title (required, max 50 characters)
    - **media**: One image file (required)
    - Requires authentication
    """
    refresh_requested = False

    async def request_refresh() -> None:
        nonlocal refresh_requested
        refresh_requested = True

    composer.refresh = request_refresh
    composer.set_title(title)
    composer.select_images(await read_selected_images(media))

    try:
        await composer.publish(profile)
    except ComposerValidationError as e:
        body = ValidationErrorResponse(
            errors={
                field: FieldErrorResponse(type=error.type, message=error.message, hint=error.hint)
                for field, error in e.errors.items()
            }
        )
        return JSONResponse(
            status_code=422,
            content=body.model_dump()
        )

    response = submission_response(composer, refresh_requested)
    if composer.state.has_submitting_failed:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=response.model_dump(mode="json")
        )
    return response


@router.get("/posts", response_model=PostGridResponse)
async def get_posts_grid(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    profile_id: Optional[int] = None,
    post_service: PostService = Depends(get_post_service)
):
    """
    Get a page of the posts grid

    - **page**: Page number (default: 1)
    - **page_size**: Items per page (default: 20, max: 100)
    - **profile_id**: Only posts of this profile
    """
    grid, total, has_more = await post_service.grid_page(page, page_size, profile_id)

    return PostGridResponse(
        tiles=[PostTileResponse.model_validate(tile) for tile in grid.tiles()],
        total=total,
        page=page,
        page_size=page_size,
        has_more=has_more,
        next_page=page + 1 if has_more else None
    )


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    post_service: PostService = Depends(get_post_service)
):
    """
    Get post by ID

    - **post_id**: Post ID
    """
    post = await post_service.get_post(post_id)
    return PostResponse.model_validate(post)
