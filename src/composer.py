"""Prompt composition - turn a vocabulary into image-generation prompts."""

import json
import re
from pathlib import Path

import config
from src.generation_client import GenerationClient, GenerationEmptyResponse
from src.logger import get_logger
from src.models import GenerationConfig, InstructionProfile, PromptBatch

ENUMERATION_PREFIX = re.compile(r"^\s*\d+[.)](?:\s+|$)")
FENCED_ARRAY = re.compile(r"```(?:json)?\s*(\[[\s\S]*?\])\s*```")
WHITESPACE_RUN = re.compile(r"\s+")


def load_prompt_template(path: Path) -> str:
    """Load a system instruction template from file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def load_instruction_profile(name: str = config.DEFAULT_PROFILE) -> InstructionProfile:
    """
    Build an instruction profile from config and its template file.

    Raises:
        KeyError: If no profile with that name is configured
    """
    settings = config.INSTRUCTION_PROFILES[name]
    return InstructionProfile(
        name=name,
        temperature=settings["temperature"],
        top_p=settings["top_p"],
        system_instruction=load_prompt_template(settings["template"]),
    )


def _as_array(text: str) -> list | None:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, list) else None


def clean_prompt_line(line: str, max_words: int = config.MAX_PROMPT_WORDS) -> str:
    """Normalize one free-text line into a prompt (may return an empty string)."""
    line = ENUMERATION_PREFIX.sub("", line).strip()
    if line.startswith('"'):
        line = line[1:]
    if line.endswith('"'):
        line = line[:-1]
    words = WHITESPACE_RUN.split(line.strip())
    return " ".join(w for w in words[:max_words] if w)


def parse_prompts(raw: str, max_words: int = config.MAX_PROMPT_WORDS) -> list[str]:
    """
    Parse a raw generation response into a list of prompts.

    Tries, in order: the whole text as a JSON array, a fenced JSON array
    inside the text, then one prompt per non-empty line.

    Args:
        raw: Raw response text
        max_words: Word limit applied to line-parsed prompts

    Returns:
        List of prompt strings
    """
    array = _as_array(raw)
    if array is None:
        fenced = FENCED_ARRAY.search(raw)
        if fenced:
            array = _as_array(fenced.group(1))
    if array is not None:
        return [item.strip() for item in array if isinstance(item, str) and item.strip()]

    prompts = []
    for line in raw.splitlines():
        cleaned = clean_prompt_line(line, max_words)
        if cleaned:
            prompts.append(cleaned)
    return prompts


def compose(
    vocabulary: list[str],
    profile: InstructionProfile,
    client: GenerationClient,
    model: str = config.GENERATION_MODEL,
) -> PromptBatch:
    """
    Generate a prompt batch from a combined vocabulary.

    Args:
        vocabulary: Deduplicated words to seed the prompts
        profile: Instruction profile (style and sampling settings)
        client: Anything with a GenerationClient-compatible generate()
        model: Model name sent with the request

    Returns:
        PromptBatch with the parsed prompts

    Raises:
        GenerationEmptyResponse: If the response has no textual content
        GenerationError: If the generation call itself fails
    """
    logger = get_logger()

    user_message = ", ".join(vocabulary)
    generation_config = GenerationConfig(
        model=model,
        temperature=profile.temperature,
        top_p=profile.top_p,
    )

    logger.info(f"→ Generating prompts ({profile.name}) from: {user_message}")
    raw = client.generate(profile.system_instruction, user_message, generation_config)

    if raw is None or not raw.strip():
        raise GenerationEmptyResponse("Generation returned no content")

    prompts = parse_prompts(raw)
    if len(prompts) != config.EXPECTED_PROMPT_COUNT:
        logger.warning(
            f"  Expected {config.EXPECTED_PROMPT_COUNT} prompts, got {len(prompts)}"
        )

    return PromptBatch(prompts=prompts)
