"""Output materialization - name, serialize and write generated artifacts."""

import json
from datetime import datetime, timezone

import config
from src.logger import get_logger
from src.models import PromptBatch
from src.storage import BlobStore


def timestamp_tag(now: datetime | None = None) -> str:
    """
    Format a UTC timestamp as YYYYMMDDHHMMSS with no separators.

    Args:
        now: Datetime to format. If None, uses the current time.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S")


def prompts_artifact_name(
    now: datetime | None = None, prefix: str = config.PROMPTS_PREFIX
) -> str:
    """Name like generated-prompts-20250601143022.json"""
    return f"{prefix}-{timestamp_tag(now)}.json"


def image_artifact_name(index: int, now: datetime | None = None) -> str:
    """Name like image-20250601143022-3.png for the 0-based index 2."""
    return f"{config.IMAGE_PREFIX}-{timestamp_tag(now)}-{index + 1}.png"


def marker_name(artifact_name: str) -> str:
    return f"{artifact_name}{config.COMPLETION_MARKER_SUFFIX}"


def serialize_batch(batch: PromptBatch) -> bytes:
    """Serialize a batch as pretty-printed UTF-8 JSON: {"prompts": [...]}"""
    return json.dumps(batch.model_dump(), ensure_ascii=False, indent=2).encode("utf-8")


def materialize_prompts(
    batch: PromptBatch,
    store: BlobStore,
    write_marker: bool = False,
    allow_overwrite: bool = False,
    now: datetime | None = None,
) -> str:
    """
    Write a prompt batch to a store.

    The completion marker is written only after the payload write has
    succeeded, so a marker always means the payload is complete. A failed
    payload write leaves no marker and is not cleaned up.

    Args:
        batch: Prompts to persist
        store: Destination store
        write_marker: Write an empty <name>.done object after the payload
        allow_overwrite: Replace an existing object with the same name
        now: Timestamp for the artifact name (current time if None)

    Returns:
        The artifact name

    Raises:
        UploadCollision: If the name exists and allow_overwrite is False
        StorageError: If the store write fails
    """
    logger = get_logger()

    name = prompts_artifact_name(now)
    store.write(
        name,
        serialize_batch(batch),
        content_type="application/json",
        allow_overwrite=allow_overwrite,
    )
    logger.info(f"✓ Saved {len(batch.prompts)} prompts to: {name}")

    if write_marker:
        store.write(
            marker_name(name),
            b"",
            content_type="text/plain",
            allow_overwrite=True,
        )
        logger.debug(f"  Wrote completion marker: {marker_name(name)}")

    return name


def materialize_image(
    data: bytes, store: BlobStore, index: int, now: datetime | None = None
) -> str:
    """
    Write one rendered image (PNG bytes) with overwrite disabled.

    Returns:
        The image name
    """
    name = image_artifact_name(index, now)
    store.write(name, data, content_type="image/png", allow_overwrite=False)
    get_logger().info(f"✓ Uploaded image: {name}")
    return name
