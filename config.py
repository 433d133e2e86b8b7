"""Configuration settings for the wordset prompt generation job."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
WORDSETS_DIR = DATA_DIR / "wordsets"
WORDSETS_TABLE = DATA_DIR / "wordsets.csv"
OUTPUT_DIR = PROJECT_ROOT / "output"
PROMPTS_DIR = PROJECT_ROOT / "prompts"
LOGS_DIR = PROJECT_ROOT / "logs"

load_dotenv(PROJECT_ROOT / ".env")

# Credentials (environment only)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE = os.getenv("SUPABASE_SERVICE_ROLE", "")

# Bucket names
WORDSETS_BUCKET = os.getenv("WORDSETS_BUCKET", "wordsets")
PROMPTS_BUCKET = os.getenv("PROMPTS_BUCKET", "generated-prompts")
IMAGES_BUCKET = os.getenv("IMAGES_BUCKET", "generated-images")
WORDSET_LIST_LIMIT = 100

# Wordset source used when --source is not given: files, bucket or table
WORDSET_SOURCES = ("files", "bucket", "table")
DEFAULT_SOURCE = os.getenv("WORDSET_SOURCE", "files")

# Legacy table layout; only used when explicitly requested
LEGACY_TABLE_COLUMNS = [
    "noun1",
    "noun2",
    "verb",
    "adjective1",
    "adjective2",
    "style",
    "setting",
    "era",
    "mood",
]

# Generation API settings
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "gpt-4o")
GENERATION_TIMEOUT = 60  # seconds
GENERATION_MAX_ATTEMPTS = 1  # no retry inside an iteration

# Image API settings
IMAGE_MODEL = "dall-e-3"
IMAGE_SIZE = "1024x1024"
IMAGE_TIMEOUT = 120  # seconds
STORAGE_TIMEOUT = 30  # seconds

# Instruction profiles
INSTRUCTION_PROFILES = {
    "creative": {
        "temperature": 1.0,
        "top_p": 0.95,
        "template": PROMPTS_DIR / "creative.txt",
    },
    "literal": {
        "temperature": 0.4,
        "top_p": 0.8,
        "template": PROMPTS_DIR / "literal.txt",
    },
}
DEFAULT_PROFILE = os.getenv("PROMPT_PROFILE", "creative")

# Prompt parsing
MAX_PROMPT_WORDS = 20
EXPECTED_PROMPT_COUNT = 5

# Output naming
PROMPTS_PREFIX = "generated-prompts"
IMAGE_PREFIX = "image"
COMPLETION_MARKER_SUFFIX = ".done"

# Run loop
DEFAULT_BATCH_SIZE = 5
DEFAULT_INTERVAL_SECONDS = 60
