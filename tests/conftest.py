"""Shared pytest fixtures."""

import json
import logging

import pytest

import config
from src.logger import DEFAULT_LOGGER_NAME
from src.models import InstructionProfile
from src.storage import LocalBlobStore, StorageError


class FakeGenerationClient:
    """Records generate() calls and replays a canned response."""

    def __init__(self, response):
        self.response = response
        self.calls = []
        self.closed = False

    def generate(self, system_instruction, user_message, generation_config):
        self.calls.append((system_instruction, user_message, generation_config))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def close(self):
        self.closed = True


class RecordingStore(LocalBlobStore):
    """Local store that records write order and can fail chosen writes."""

    def __init__(self, root, fail_on=()):
        super().__init__(root)
        self.fail_on = fail_on
        self.writes = []

    def write(self, name, data, content_type="application/octet-stream", allow_overwrite=False):
        if any(name.endswith(suffix) for suffix in self.fail_on):
            raise StorageError(f"Simulated failure writing {name}")
        super().write(name, data, content_type, allow_overwrite)
        self.writes.append(name)


@pytest.fixture(autouse=True)
def temp_logs_dir(tmp_path, monkeypatch):
    """Keep log files out of the project tree."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setattr(config, "LOGS_DIR", logs_dir)
    yield logs_dir

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def make_client():
    return FakeGenerationClient


@pytest.fixture
def recording_store(tmp_path):
    def _make(fail_on=()):
        return RecordingStore(tmp_path / "out", fail_on=fail_on)

    return _make


@pytest.fixture
def profile():
    return InstructionProfile(
        name="test",
        temperature=0.9,
        top_p=0.95,
        system_instruction="Write image prompts.",
    )


@pytest.fixture
def wordsets_dir(tmp_path):
    directory = tmp_path / "wordsets"
    directory.mkdir()
    return directory


@pytest.fixture
def write_doc(wordsets_dir):
    """Write a wordset document (dict or raw text) into wordsets_dir."""

    def _write(name, content):
        path = wordsets_dir / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write
