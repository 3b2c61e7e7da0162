from __future__ import annotations

import unittest
from unittest.mock import patch

from fakes import FakeEncoder, FakePostRepository, FakeUploader, make_image, make_profile
from PIL import Image

from px_service.application.composer import PUBLISH_FAILED_MESSAGE, PostComposer
from px_service.domain.models import SubmissionState, UploadResult
from px_service.exceptions import ComposerValidationError
from px_service.infrastructure.image_encoder import ImageEncoder


class _RefreshSpy:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


def _composer(
    *,
    encoder: FakeEncoder | ImageEncoder | None = None,
    uploader: FakeUploader | None = None,
    repo: FakePostRepository | None = None,
    refresh: _RefreshSpy | None = None,
) -> PostComposer:
    return PostComposer(
        encoder or FakeEncoder(),
        uploader or FakeUploader(),
        repo if repo is not None else FakePostRepository(),
        refresh=refresh,
        title_max_length=50,
    )


class TestComposerValidation(unittest.IsolatedAsyncioTestCase):
    async def test_empty_title_rejected_before_network(self) -> None:
        encoder, uploader, repo = FakeEncoder(), FakeUploader(), FakePostRepository()
        composer = _composer(encoder=encoder, uploader=uploader, repo=repo)
        composer.set_title("")
        composer.select_images([make_image()])

        with self.assertRaises(ComposerValidationError) as ctx:
            await composer.publish(make_profile())

        self.assertEqual(ctx.exception.errors["title"].type, "required")
        self.assertEqual(ctx.exception.errors["title"].message, "Title is required")
        self.assertEqual(encoder.calls, [])
        self.assertEqual(uploader.calls, [])
        self.assertEqual(repo.create_calls, [])
        self.assertEqual(composer.state, SubmissionState())

    async def test_missing_title_is_required(self) -> None:
        composer = _composer()
        composer.select_images([make_image()])

        errors = composer.validate()

        self.assertEqual(list(errors), ["title"])
        self.assertEqual(errors["title"].type, "required")

    async def test_title_over_limit_rejected_with_length_error(self) -> None:
        encoder, uploader = FakeEncoder(), FakeUploader()
        composer = _composer(encoder=encoder, uploader=uploader)
        composer.set_title("x" * 51)
        composer.select_images([make_image()])

        with self.assertRaises(ComposerValidationError) as ctx:
            await composer.publish(make_profile())

        error = ctx.exception.errors["title"]
        self.assertEqual(error.type, "maxLength")
        self.assertEqual(error.message, "Max title characters is 50")
        self.assertEqual(error.hint, "51 of 50 characters")
        self.assertEqual(encoder.calls, [])
        self.assertEqual(uploader.calls, [])

    async def test_title_at_limit_is_valid(self) -> None:
        composer = _composer()
        composer.set_title("x" * 50)
        composer.select_images([make_image()])

        self.assertTrue(composer.is_valid)
        self.assertTrue(composer.can_submit)

    async def test_missing_image_rejected(self) -> None:
        uploader = FakeUploader()
        composer = _composer(uploader=uploader)
        composer.set_title("Sunset")

        with self.assertRaises(ComposerValidationError) as ctx:
            await composer.publish(make_profile())

        self.assertEqual(list(ctx.exception.errors), ["media"])
        self.assertEqual(ctx.exception.errors["media"].type, "required")
        self.assertEqual(ctx.exception.errors["media"].message, "Image/Gif is required")
        self.assertEqual(uploader.calls, [])

    async def test_explicit_zero_title_limit_is_kept(self) -> None:
        composer = PostComposer(FakeEncoder(), FakeUploader(), FakePostRepository(), title_max_length=0)
        composer.set_title("a")
        composer.select_images([make_image()])

        self.assertEqual(composer.validate()["title"].type, "maxLength")


class TestComposerSelection(unittest.TestCase):
    def test_single_file_sets_preview(self) -> None:
        composer = _composer()
        image = make_image()

        self.assertTrue(composer.select_images([image]))
        self.assertIs(composer.image, image)
        self.assertTrue(composer.image_preview.startswith("data:image/png;base64,"))

    def test_new_selection_replaces_preview(self) -> None:
        composer = _composer()
        composer.select_images([make_image("first.png")])
        first_preview = composer.image_preview

        second = make_image("second.png")
        second.content_type = "image/gif"
        composer.select_images([second])

        self.assertEqual(composer.image.filename, "second.png")
        self.assertNotEqual(composer.image_preview, first_preview)
        self.assertTrue(composer.image_preview.startswith("data:image/gif;base64,"))

    def test_multiple_files_leave_selection_unchanged(self) -> None:
        composer = _composer()
        composer.select_images([make_image("kept.png")])

        changed = composer.select_images([make_image("a.png"), make_image("b.png")])

        self.assertFalse(changed)
        self.assertEqual(composer.image.filename, "kept.png")

    def test_no_files_leave_selection_unchanged(self) -> None:
        composer = _composer()

        self.assertFalse(composer.select_images([]))
        self.assertIsNone(composer.image)

    def test_unselect_clears_image_and_preview(self) -> None:
        composer = _composer()
        composer.select_images([make_image()])

        composer.unselect_image()

        self.assertIsNone(composer.image)
        self.assertIsNone(composer.image_preview)


class TestComposerPublish(unittest.IsolatedAsyncioTestCase):
    async def test_success_clears_form_and_refreshes(self) -> None:
        encoder = FakeEncoder(result="data:image/png;base64,QUJD")
        uploader = FakeUploader(UploadResult(asset_secure_url="https://cdn.example.com/sunset.png"))
        repo = FakePostRepository()
        refresh = _RefreshSpy()
        composer = _composer(encoder=encoder, uploader=uploader, repo=repo, refresh=refresh)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(make_profile())

        self.assertTrue(state.has_form_been_submitted)
        self.assertTrue(state.has_submitting_been_succesful)
        self.assertFalse(state.has_submitting_failed)
        self.assertIsNone(composer.image)
        self.assertIsNone(composer.image_preview)
        self.assertIsNone(composer.title)
        self.assertIsNone(composer.error_message)
        self.assertEqual(refresh.calls, 1)
        self.assertEqual(uploader.calls, ["data:image/png;base64,QUJD"])
        self.assertEqual(
            repo.create_calls,
            [{
                "asset_url": "https://cdn.example.com/sunset.png",
                "title": "Sunset",
                "profile_id": 7,
                "user_id": "user-1",
            }],
        )
        self.assertEqual(composer.last_post.id, 1)
        self.assertFalse(composer.is_submitting)

    async def test_missing_asset_url_skips_insert_and_fails(self) -> None:
        repo = FakePostRepository()
        refresh = _RefreshSpy()
        composer = _composer(uploader=FakeUploader(UploadResult()), repo=repo, refresh=refresh)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertFalse(state.has_submitting_been_succesful)
        self.assertTrue(state.has_form_been_submitted)
        self.assertEqual(repo.create_calls, [])
        self.assertEqual(composer.error_message, PUBLISH_FAILED_MESSAGE)
        self.assertEqual(refresh.calls, 0)
        self.assertEqual(composer.title, "Sunset")
        self.assertIsNotNone(composer.image)

    async def test_upload_error_fails_even_with_url(self) -> None:
        repo = FakePostRepository()
        uploader = FakeUploader(UploadResult(asset_secure_url="https://cdn.example.com/x.png", error="quota"))
        composer = _composer(uploader=uploader, repo=repo)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertEqual(repo.create_calls, [])

    async def test_insert_error_fails_and_leaves_asset(self) -> None:
        uploader = FakeUploader(UploadResult(asset_secure_url="https://cdn.example.com/orphan.png"))
        repo = FakePostRepository(fail=True)
        composer = _composer(uploader=uploader, repo=repo)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        with self.assertLogs("px_service.application.composer", level="WARNING") as logs:
            state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertFalse(state.has_submitting_been_succesful)
        self.assertEqual(len(uploader.calls), 1)
        self.assertEqual(len(repo.create_calls), 1)
        self.assertEqual(repo.posts, [])
        self.assertTrue(any("orphan.png" in line for line in logs.output))

    async def test_encode_error_fails_without_upload(self) -> None:
        uploader = FakeUploader()
        composer = _composer(encoder=FakeEncoder(fail=True), uploader=uploader)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertEqual(uploader.calls, [])

    async def test_empty_encoding_fails_without_upload(self) -> None:
        uploader = FakeUploader()
        composer = _composer(encoder=FakeEncoder(result=""), uploader=uploader)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertEqual(uploader.calls, [])

    async def test_oversized_decoded_image_fails_without_upload(self) -> None:
        uploader = FakeUploader()
        composer = _composer(encoder=ImageEncoder(), uploader=uploader)
        composer.set_title("Huge")
        composer.select_images([make_image()])

        with patch.object(Image, "MAX_IMAGE_PIXELS", 5):
            state = await composer.publish(make_profile())

        self.assertTrue(state.has_submitting_failed)
        self.assertEqual(composer.error_message, PUBLISH_FAILED_MESSAGE)
        self.assertFalse(composer.is_submitting)
        self.assertEqual(uploader.calls, [])

    async def test_no_profile_does_nothing(self) -> None:
        encoder = FakeEncoder()
        composer = _composer(encoder=encoder)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        state = await composer.publish(None)

        self.assertEqual(state, SubmissionState())
        self.assertEqual(encoder.calls, [])

    async def test_resubmit_after_failure_reruns_sequence(self) -> None:
        uploader = FakeUploader(UploadResult(error="temporarily down"))
        repo = FakePostRepository()
        composer = _composer(uploader=uploader, repo=repo)
        composer.set_title("Sunset")
        composer.select_images([make_image()])

        first = await composer.publish(make_profile())
        uploader.result = UploadResult(asset_secure_url="https://cdn.example.com/ok.png")
        second = await composer.publish(make_profile())

        self.assertTrue(first.has_submitting_failed)
        self.assertTrue(second.has_submitting_been_succesful)
        self.assertFalse(second.has_submitting_failed)
        self.assertEqual(len(uploader.calls), 2)
        self.assertEqual(len(repo.posts), 1)


if __name__ == "__main__":
    unittest.main()
