"""Single-pass and continuous drivers for the prompt and image jobs."""

import random
import threading
from typing import Callable

from tqdm import tqdm

import config
from src.composer import compose
from src.generation_client import GenerationClient
from src.image_client import ImageClient, build_image_prompt
from src.logger import get_logger
from src.materializer import materialize_image, materialize_prompts
from src.models import InstructionProfile, RunOutcome
from src.selector import merge_vocabulary, pick_one, pick_two_distinct
from src.storage import BlobStore
from src.wordset_source import WordsetSource


def _not_enough(found: int, required: int) -> RunOutcome:
    reason = "source_unavailable" if found == 0 else "insufficient_wordsets"
    return RunOutcome(status="no_op", reason=f"{reason}: found {found}, need {required}")


def run_prompts_once(
    source: WordsetSource,
    client: GenerationClient,
    store: BlobStore,
    profile: InstructionProfile,
    rng: random.Random | None = None,
    write_marker: bool = False,
    allow_overwrite: bool = False,
) -> RunOutcome:
    """
    Pair two wordsets, generate prompts and persist them.

    Generation and storage errors propagate to the caller.

    Args:
        source: Where wordsets come from
        client: Generation client
        store: Destination store
        profile: Instruction profile for the composer
        rng: Random source for selection
        write_marker: Write a <name>.done marker after the payload
        allow_overwrite: Allow replacing an artifact with the same name

    Returns:
        RunOutcome: success with the artifact name, or no_op
    """
    logger = get_logger()

    wordsets = source.load()
    if len(wordsets) < 2:
        logger.warning(f"✗ Not enough wordsets to pair (found {len(wordsets)}, need 2)")
        return _not_enough(len(wordsets), 2)

    first, second = pick_two_distinct(wordsets, rng)
    vocabulary = merge_vocabulary(first, second)

    batch = compose(vocabulary, profile, client)
    name = materialize_prompts(
        batch, store, write_marker=write_marker, allow_overwrite=allow_overwrite
    )
    return RunOutcome(status="success", artifact=name, succeeded=len(batch.prompts))


def run_images_once(
    source: WordsetSource,
    image_client: ImageClient,
    store: BlobStore,
    batch_size: int = config.DEFAULT_BATCH_SIZE,
    rng: random.Random | None = None,
) -> RunOutcome:
    """
    Render batch_size images, one random wordset per image.

    A failure on one image is logged with its 1-based index and does not
    stop the rest of the batch.

    Returns:
        RunOutcome with success/failure counts, or no_op
    """
    logger = get_logger()

    wordsets = source.load()
    if len(wordsets) < 1:
        logger.warning("✗ No wordsets found.")
        return _not_enough(0, 1)

    logger.info(f"→ Generating {batch_size} images using one wordset per prompt")

    succeeded = 0
    failed = 0
    for i in tqdm(range(batch_size), desc="  Rendering"):
        prompt = build_image_prompt(pick_one(wordsets, rng))
        try:
            logger.info(f'→ Generating image for prompt: "{prompt}"')
            materialize_image(image_client.render(prompt), store, i)
            succeeded += 1
        except Exception as e:
            logger.error(f"✗ Failed image #{i + 1}: {e}")
            failed += 1

    logger.info(f"  Images: {succeeded} uploaded, {failed} failed")
    if succeeded == 0 and failed > 0:
        return RunOutcome(
            status="failed", reason="all images failed", succeeded=0, failed=failed
        )
    return RunOutcome(status="success", succeeded=succeeded, failed=failed)


def run_forever(
    iteration: Callable[[], object],
    interval_seconds: float = config.DEFAULT_INTERVAL_SECONDS,
    stop_event: threading.Event | None = None,
    max_iterations: int | None = None,
) -> int:
    """
    Call iteration() repeatedly with a fixed pause between calls.

    An exception raised by one iteration is logged and the loop carries on
    with the next one after the interval. Setting stop_event ends the loop
    between iterations, including during the pause.

    Args:
        iteration: One pass of the job
        interval_seconds: Pause after each iteration
        stop_event: Event that ends the loop when set
        max_iterations: Stop after this many iterations (None = unbounded)

    Returns:
        Number of iterations run
    """
    logger = get_logger()
    stop_event = stop_event or threading.Event()

    count = 0
    while not stop_event.is_set():
        count += 1
        try:
            outcome = iteration()
            if isinstance(outcome, RunOutcome) and outcome.status != "success":
                logger.warning(f"  Iteration {count}: {outcome.status} ({outcome.reason or 'no detail'})")
        except Exception as e:
            logger.error(f"✗ Outer loop error in iteration {count}: {e}", exc_info=True)

        if max_iterations is not None and count >= max_iterations:
            break

        logger.info(f"✓ Batch complete. Waiting {interval_seconds}s before next run...")
        stop_event.wait(interval_seconds)

    return count
