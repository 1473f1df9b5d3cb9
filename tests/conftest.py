from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.helpers.engine_stubs import FakeTheora, MovieFactory, RecordingModel, RecordingRename
from video_encode.engine import logger_slot


@pytest.fixture(autouse=True)
def reset_engine_logger() -> Iterator[None]:
    """Keep the process-wide engine logger slot isolated between tests."""

    original = logger_slot.get_logger()
    yield
    logger_slot.set_logger(original)


@pytest.fixture
def source_path(tmp_path: Path) -> Path:
    path = tmp_path / "video" / "file.mov"
    path.parent.mkdir()
    path.write_bytes(b"source")
    return path


@pytest.fixture
def movie_factory() -> MovieFactory:
    return MovieFactory()


@pytest.fixture
def rename() -> RecordingRename:
    return RecordingRename()


@pytest.fixture
def model() -> RecordingModel:
    return RecordingModel()


@pytest.fixture
def fake_theora() -> Iterator[type[FakeTheora]]:
    FakeTheora.instances = []
    FakeTheora.error = None
    yield FakeTheora
    FakeTheora.instances = []
    FakeTheora.error = None


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()
