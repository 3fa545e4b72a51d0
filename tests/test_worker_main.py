"""Tests for the thumbnail worker lifecycle hooks."""

import pytest

from manager import config
from worker.main import shutdown, startup
from worker.thumbnail_processor import ThumbnailProcessor


@pytest.mark.asyncio
async def test_startup_builds_processor(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DATABASE_PATH", str(tmp_path / "db" / "metadata.db"))
    monkeypatch.setattr(config, "FOLDER_PATH", str(tmp_path / "files"))
    ctx = {}

    await startup(ctx)

    assert isinstance(ctx["processor"], ThumbnailProcessor)
    assert (tmp_path / "files").is_dir()
    assert (tmp_path / "db" / "metadata.db").exists()

    await shutdown(ctx)
    assert "processor" not in ctx
