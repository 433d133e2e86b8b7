"""Pydantic data models for the wordset prompt generation job."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

# An ordered list of words or short phrases
Wordset = list[str]


class WordsetDocument(BaseModel):
    """A source document holding one or more wordsets."""

    wordsets: list[list[str]]


class GenerationConfig(BaseModel):
    """Sampling settings sent with a single generation request."""

    model: str
    temperature: float
    top_p: float


class InstructionProfile(BaseModel):
    """Prompt style used for a deployment (e.g. creative or literal)."""

    name: str
    temperature: float = Field(ge=0.0, le=2.0)
    top_p: float = Field(gt=0.0, le=1.0)
    system_instruction: str


class PromptBatch(BaseModel):
    """Prompts produced from one combined vocabulary."""

    prompts: list[str] = Field(default_factory=list)


class RunOutcome(BaseModel):
    """Result of one pass of the job.

    ``no_op`` means there was nothing to do (too few wordsets); it is kept
    apart from ``success`` so callers can report it distinctly.
    """

    status: Literal["success", "no_op", "failed"]
    reason: Optional[str] = None
    artifact: Optional[str] = None
    succeeded: int = 0
    failed: int = 0
