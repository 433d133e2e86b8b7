# tests/test_materializer.py
"""Tests for artifact naming, serialization and completion markers."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.materializer import (
    image_artifact_name,
    marker_name,
    materialize_image,
    materialize_prompts,
    prompts_artifact_name,
    serialize_batch,
    timestamp_tag,
)
from src.models import PromptBatch
from src.storage import LocalBlobStore, StorageError, UploadCollision

FIXED = datetime(2025, 6, 1, 14, 30, 22, tzinfo=timezone.utc)


@pytest.fixture
def batch():
    return PromptBatch(prompts=["A castle at dawn", "A dragon in fog"])


class TestNaming:
    def test_prompts_name(self):
        assert prompts_artifact_name(FIXED) == "generated-prompts-20250601143022.json"

    def test_image_name_is_one_based(self):
        assert image_artifact_name(2, FIXED) == "image-20250601143022-3.png"

    def test_aware_timestamp_converted_to_utc(self):
        local = FIXED.astimezone(timezone(timedelta(hours=5)))
        assert timestamp_tag(local) == "20250601143022"

    def test_naive_timestamp_used_as_is(self):
        assert timestamp_tag(datetime(2024, 1, 2, 3, 4, 5)) == "20240102030405"

    def test_default_is_fourteen_digits(self):
        tag = timestamp_tag()
        assert len(tag) == 14 and tag.isdigit()

    def test_marker_name(self):
        assert marker_name("generated-prompts-1.json") == "generated-prompts-1.json.done"


class TestSerialize:
    def test_pretty_printed_prompts_document(self, batch):
        data = serialize_batch(batch)
        assert json.loads(data.decode("utf-8")) == {"prompts": batch.prompts}
        assert data.decode("utf-8") == json.dumps({"prompts": batch.prompts}, indent=2)

    def test_non_ascii_kept_as_utf8(self):
        data = serialize_batch(PromptBatch(prompts=["Café at dusk"]))
        assert "Café".encode("utf-8") in data


class TestMaterializePrompts:
    def test_marker_written_right_after_payload(self, batch, recording_store):
        store = recording_store()
        name = materialize_prompts(batch, store, write_marker=True, allow_overwrite=True, now=FIXED)

        assert name == "generated-prompts-20250601143022.json"
        assert store.writes == [name, f"{name}.done"]
        assert store.read(f"{name}.done") == b""
        assert json.loads(store.read(name)) == {"prompts": batch.prompts}

    def test_payload_failure_writes_no_marker(self, batch, recording_store):
        store = recording_store(fail_on=(".json",))
        with pytest.raises(StorageError):
            materialize_prompts(batch, store, write_marker=True, now=FIXED)

        assert store.writes == []
        assert not store.exists("generated-prompts-20250601143022.json.done")

    def test_no_marker_by_default(self, batch, recording_store):
        store = recording_store()
        name = materialize_prompts(batch, store, now=FIXED)
        assert store.writes == [name]

    def test_collision_fails_without_mutating_existing(self, batch, tmp_path):
        store = LocalBlobStore(tmp_path)
        name = prompts_artifact_name(FIXED)
        (tmp_path / name).write_bytes(b"earlier run")

        with pytest.raises(UploadCollision):
            materialize_prompts(batch, store, allow_overwrite=False, now=FIXED)

        assert (tmp_path / name).read_bytes() == b"earlier run"

    def test_file_variant_truncates_existing(self, batch, tmp_path):
        store = LocalBlobStore(tmp_path)
        name = prompts_artifact_name(FIXED)
        (tmp_path / name).write_bytes(b"x" * 5000)

        materialize_prompts(batch, store, write_marker=True, allow_overwrite=True, now=FIXED)

        assert json.loads((tmp_path / name).read_bytes()) == {"prompts": batch.prompts}


class TestMaterializeImage:
    def test_writes_png_bytes(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        name = materialize_image(b"\x89PNG fake", store, 0, now=FIXED)
        assert name == "image-20250601143022-1.png"
        assert (tmp_path / name).read_bytes() == b"\x89PNG fake"

    def test_never_overwrites(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        materialize_image(b"first", store, 0, now=FIXED)
        with pytest.raises(UploadCollision):
            materialize_image(b"second", store, 0, now=FIXED)
        assert (tmp_path / "image-20250601143022-1.png").read_bytes() == b"first"
