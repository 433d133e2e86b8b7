#!/usr/bin/env python3
"""Wordset Prompt Generation - Main Orchestrator."""

import argparse
import random
import signal
import sys
import threading
from pathlib import Path
from typing import Callable

import config
from src.composer import load_instruction_profile
from src.generation_client import GenerationClient
from src.image_client import ImageClient
from src.logger import get_logger, setup_logger, setup_loop_logger
from src.models import RunOutcome
from src.runner import run_forever, run_images_once, run_prompts_once
from src.storage import BlobStore, LocalBlobStore, SupabaseBlobStore
from src.wordset_source import (
    BucketWordsetSource,
    DirectoryWordsetSource,
    TableWordsetSource,
    WordsetSource,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_OP = 3


def build_source(args: argparse.Namespace, resources: list) -> WordsetSource:
    if args.source == "bucket":
        store = SupabaseBlobStore(
            config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE, config.WORDSETS_BUCKET
        )
        resources.append(store)
        return BucketWordsetSource(store)
    if args.source == "table":
        columns = config.LEGACY_TABLE_COLUMNS if args.legacy_columns else None
        return TableWordsetSource(args.table, columns=columns)
    if args.source == "files":
        return DirectoryWordsetSource(args.wordsets_dir)
    raise ValueError(f"Unknown wordset source: {args.source!r}")


def build_destination(args: argparse.Namespace, resources: list) -> BlobStore:
    if args.destination == "bucket":
        bucket = config.IMAGES_BUCKET if args.mode == "images" else config.PROMPTS_BUCKET
        store = SupabaseBlobStore(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE, bucket)
        resources.append(store)
        return store
    if args.mode == "images":
        return LocalBlobStore(args.output_dir / "images")
    return LocalBlobStore(args.output_dir)


def build_iteration(args: argparse.Namespace, resources: list) -> Callable[[], RunOutcome]:
    """
    Wire the source, destination and clients into a single-pass callable.

    Every HTTP-backed object is appended to ``resources`` as soon as it is
    created, so the caller can close them even if a later step fails.

    Raises:
        KeyError: If the instruction profile is not configured
        OSError: If the profile's template file cannot be read
        ValueError: If the wordset source is unknown
    """
    rng = random.Random(args.seed)
    source = build_source(args, resources)
    store = build_destination(args, resources)

    if args.mode == "images":
        image_client = ImageClient()
        resources.append(image_client)

        def iteration():
            return run_images_once(source, image_client, store, args.batch_size, rng)

        return iteration

    profile = load_instruction_profile(args.profile)
    client = GenerationClient()
    resources.append(client)
    file_output = args.destination == "files"

    def iteration():
        return run_prompts_once(
            source,
            client,
            store,
            profile,
            rng,
            write_marker=file_output,
            allow_overwrite=file_output,
        )

    return iteration


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate image prompts (or images) from random wordsets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One pass: pair two wordsets from data/wordsets, write prompts to output/
  python main.py

  # Read wordsets from the bucket, upload prompts to the bucket, literal style
  python main.py --source bucket --destination bucket --profile literal

  # Render 5 images every 60 seconds until stopped
  python main.py --mode images --loop --batch-size 5 --interval 60
        """,
    )
    parser.add_argument(
        "--mode",
        choices=["prompts", "images"],
        default="prompts",
        help="Generate prompt batches or rendered images",
    )
    parser.add_argument(
        "--source",
        choices=config.WORDSET_SOURCES,
        default=config.DEFAULT_SOURCE,
        help="Where wordsets are loaded from",
    )
    parser.add_argument(
        "--destination",
        choices=["files", "bucket"],
        default="files",
        help="Where outputs are written. Files get a .done marker; bucket writes never overwrite.",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(config.INSTRUCTION_PROFILES),
        default=config.DEFAULT_PROFILE,
        help="Instruction profile for prompt generation",
    )
    parser.add_argument("--wordsets-dir", type=Path, default=config.WORDSETS_DIR)
    parser.add_argument("--table", type=Path, default=config.WORDSETS_TABLE)
    parser.add_argument(
        "--legacy-columns",
        action="store_true",
        help="Read only the fixed nine-column layout from the table",
    )
    parser.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR)
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Run continuously instead of a single pass",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=config.DEFAULT_INTERVAL_SECONDS,
        help="Seconds between iterations in loop mode",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=config.DEFAULT_BATCH_SIZE,
        help="Images per iteration in images mode",
    )
    parser.add_argument("--seed", type=int, help="Seed for wordset selection")
    return parser


def close_all(resources: list) -> None:
    logger = get_logger()
    for resource in reversed(resources):
        try:
            resource.close()
        except Exception as e:
            logger.warning(f"Failed to close {type(resource).__name__}: {e}")


def run(args: argparse.Namespace, iteration: Callable[[], RunOutcome]) -> int:
    logger = get_logger()

    logger.info("=" * 60)
    logger.info("Wordset Prompt Generation")
    logger.info("=" * 60)
    logger.info(f"Mode: {args.mode}")
    logger.info(f"Source: {args.source}")
    logger.info(f"Destination: {args.destination}")
    if args.mode == "prompts":
        logger.info(f"Profile: {args.profile}")
    else:
        logger.info(f"Batch size: {args.batch_size}")
    if args.loop:
        logger.info(f"Loop: every {args.interval} seconds")
    logger.info("=" * 60)

    if args.loop:
        stop_event = threading.Event()
        signal.signal(signal.SIGTERM, lambda *_: stop_event.set())
        try:
            count = run_forever(iteration, args.interval, stop_event)
        except KeyboardInterrupt:
            logger.warning("Loop interrupted by user.")
            return EXIT_OK
        logger.info(f"Loop stopped after {count} iteration(s)")
        return EXIT_OK

    try:
        outcome = iteration()
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user.")
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"✗ Run failed: {e}", exc_info=True)
        return EXIT_FAILURE

    if outcome.status == "no_op":
        logger.warning(f"Nothing to do: {outcome.reason}")
        return EXIT_NO_OP
    if outcome.status == "failed":
        logger.error(f"✗ Run failed: {outcome.reason}")
        return EXIT_FAILURE

    logger.info("=" * 60)
    logger.info("Run completed successfully!")
    logger.info("=" * 60)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_loop_logger(args.mode) if args.loop else setup_logger()

    resources = []
    try:
        try:
            iteration = build_iteration(args, resources)
        except Exception as e:
            logger.error(f"✗ Setup failed: {e}")
            return EXIT_FAILURE
        return run(args, iteration)
    finally:
        close_all(resources)


if __name__ == "__main__":
    sys.exit(main())
