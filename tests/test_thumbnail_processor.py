"""Tests for thumbnail generation and the saq task wrapper."""

import io
from unittest.mock import patch

import pytest
from PIL import Image

from common.exceptions import TransientBackendError
from common.types import ImageRecord, JobStatus, StoredFileRecord, ThumbnailJob
from worker.tasks import generate_thumbnails
from worker.thumbnail_processor import make_thumbnail


@pytest.fixture
def image_record(file_repo, content_store, owner, png_bytes):
    record = ImageRecord(
        file_id="img-1", owner_id=owner.user_id, name="photo.png", storage_key="key-img-1"
    )
    content_store.write(record.storage_key, png_bytes)
    return file_repo.create(record)


def variant_files(content_store, storage_key):
    return sorted(p.name for p in content_store.root.iterdir() if p.name.startswith(f"{storage_key}_"))


class TestMakeThumbnail:
    def test_resizes_to_width_keeping_aspect_ratio(self, png_factory):
        data = make_thumbnail(png_factory(800, 600), 100)

        with Image.open(io.BytesIO(data)) as img:
            assert img.size == (100, 75)
            assert img.format == "PNG"

    def test_jpeg_stays_jpeg(self):
        source = io.BytesIO()
        Image.new("RGB", (1000, 500), (10, 20, 30)).save(source, format="JPEG")

        data = make_thumbnail(source.getvalue(), 250)

        with Image.open(io.BytesIO(data)) as img:
            assert img.size == (250, 125)
            assert img.format == "JPEG"

    def test_deterministic(self, png_bytes):
        assert make_thumbnail(png_bytes, 250) == make_thumbnail(png_bytes, 250)


class TestThumbnailProcessor:
    """Jobs move to done, or fail permanently or transiently."""

    def test_generates_all_variants(self, processor, image_record, content_store, owner):
        result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="img-1"))

        assert result.status is JobStatus.DONE
        assert result.succeeded
        assert sorted(result.variant_keys) == ["key-img-1_100", "key-img-1_250", "key-img-1_500"]
        for width in (100, 250, 500):
            data = content_store.read_variant("key-img-1", width)
            with Image.open(io.BytesIO(data)) as img:
                assert img.width == width

    def test_rerun_overwrites_same_variants(self, processor, image_record, content_store, owner):
        job = ThumbnailJob(owner_id=owner.user_id, file_id="img-1")

        processor.process(job)
        first = {w: content_store.read_variant("key-img-1", w) for w in (100, 250, 500)}
        second_result = processor.process(job)
        second = {w: content_store.read_variant("key-img-1", w) for w in (100, 250, 500)}

        assert second_result.succeeded
        assert first == second
        assert variant_files(content_store, "key-img-1") == ["key-img-1_100", "key-img-1_250", "key-img-1_500"]

    @pytest.mark.parametrize("job, reason", [
        (ThumbnailJob(owner_id="user-owner", file_id=""), "Missing fileId"),
        (ThumbnailJob(owner_id="", file_id="img-1"), "Missing userId"),
        (ThumbnailJob(owner_id="user-owner", file_id="missing"), "File not found"),
        (ThumbnailJob(owner_id="user-other", file_id="img-1"), "File not found"),
    ])
    def test_invalid_jobs_fail_permanently(self, processor, image_record, content_store, job, reason):
        result = processor.process(job)

        assert result.status is JobStatus.FAILED
        assert result.permanent is True
        assert result.reason == reason
        assert variant_files(content_store, "key-img-1") == []

    def test_non_image_fails_permanently(self, processor, file_repo, content_store, owner):
        file_repo.create(StoredFileRecord(
            file_id="file-1", owner_id=owner.user_id, name="a.txt", storage_key="key-file-1"
        ))
        content_store.write("key-file-1", b"text")

        result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="file-1"))

        assert result.permanent is True
        assert result.reason == "File is not an image"
        assert variant_files(content_store, "key-file-1") == []

    def test_missing_primary_content_fails_permanently(self, processor, file_repo, owner):
        file_repo.create(ImageRecord(
            file_id="img-2", owner_id=owner.user_id, name="b.png", storage_key="key-img-2"
        ))

        result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="img-2"))

        assert result.permanent is True
        assert result.reason == "Primary content is missing"

    def test_corrupt_image_fails_transiently(self, processor, file_repo, content_store, owner):
        file_repo.create(ImageRecord(
            file_id="img-3", owner_id=owner.user_id, name="c.png", storage_key="key-img-3"
        ))
        content_store.write("key-img-3", b"definitely not an image")

        result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="img-3"))

        assert result.status is JobStatus.FAILED
        assert result.permanent is False
        assert variant_files(content_store, "key-img-3") == []

    def test_storage_failure_fails_transiently(self, processor, image_record, content_store, owner):
        with patch.object(content_store, "write_variant", side_effect=TransientBackendError()):
            result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="img-1"))

        assert result.status is JobStatus.FAILED
        assert result.permanent is False

    def test_result_to_dict(self, processor, image_record, owner):
        result = processor.process(ThumbnailJob(owner_id=owner.user_id, file_id="img-1"))

        payload = result.to_dict()
        assert payload["status"] == "done"
        assert payload["file_id"] == "img-1"
        assert payload["owner_id"] == owner.user_id


class TestGenerateThumbnailsTask:
    """The saq task completes on success or permanent failure and raises to retry."""

    @pytest.mark.asyncio
    async def test_success_returns_result(self, processor, image_record, owner):
        payload = await generate_thumbnails({"processor": processor}, owner_id=owner.user_id, file_id="img-1")

        assert payload["status"] == "done"

    @pytest.mark.asyncio
    async def test_permanent_failure_completes_without_raising(self, processor, image_record):
        payload = await generate_thumbnails({"processor": processor}, owner_id="user-other", file_id="img-1")

        assert payload["status"] == "failed"
        assert payload["permanent"] is True

    @pytest.mark.asyncio
    async def test_transient_failure_raises_for_retry(self, processor, file_repo, content_store, owner):
        file_repo.create(ImageRecord(
            file_id="img-4", owner_id=owner.user_id, name="d.png", storage_key="key-img-4"
        ))
        content_store.write("key-img-4", b"garbage")

        with pytest.raises(TransientBackendError):
            await generate_thumbnails({"processor": processor}, owner_id=owner.user_id, file_id="img-4")
