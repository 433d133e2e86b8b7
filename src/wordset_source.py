"""Wordset sources: directory of JSON files, storage bucket, or table."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

import config
from src.logger import get_logger
from src.models import Wordset, WordsetDocument
from src.storage import BlobStore, StorageError


def parse_wordset_document(text: str | bytes) -> list[Wordset]:
    """
    Parse a wordset document of the form {"wordsets": [[...], ...]}.

    Raises:
        ValueError: If the text is not valid JSON or has the wrong shape
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    try:
        document = WordsetDocument.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid wordset document: {e.error_count()} error(s)") from e

    return document.wordsets


class WordsetSource(ABC):
    """Anything that can produce a collection of wordsets."""

    @abstractmethod
    def load(self) -> list[Wordset]:
        """Load all wordsets. Returns an empty list when nothing valid is found."""
        ...


class DirectoryWordsetSource(WordsetSource):
    """Reads every *.json wordset document in a directory."""

    def __init__(self, directory: Path = config.WORDSETS_DIR):
        self.directory = Path(directory)

    def load(self) -> list[Wordset]:
        logger = get_logger()

        if not self.directory.is_dir():
            logger.warning(f"✗ Wordsets directory not found: {self.directory}")
            return []

        paths = sorted(self.directory.glob("*.json"), reverse=True)
        wordsets = []
        for path in paths:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    wordsets.extend(parse_wordset_document(f.read()))
            except (OSError, ValueError) as e:
                logger.warning(f"✗ Failed to parse {path.name}: {e}")

        logger.info(f"  Loaded {len(wordsets)} wordsets from {len(paths)} file(s)")
        return wordsets


class BucketWordsetSource(WordsetSource):
    """Lists and downloads wordset documents from a blob store."""

    def __init__(self, store: BlobStore, limit: int = config.WORDSET_LIST_LIMIT):
        self.store = store
        self.limit = limit

    def load(self) -> list[Wordset]:
        logger = get_logger()

        try:
            names = self.store.list_names(suffix=".json", limit=self.limit)
        except StorageError as e:
            logger.warning(f"✗ Failed to list wordsets: {e}")
            return []

        wordsets = []
        for name in names:
            try:
                wordsets.extend(parse_wordset_document(self.store.read(name)))
            except StorageError as e:
                logger.warning(f"✗ Failed to download {name}: {e}")
            except ValueError as e:
                logger.warning(f"✗ Failed to parse {name}: {e}")

        logger.info(f"  Loaded {len(wordsets)} wordsets from {len(names)} object(s)")
        return wordsets


class TableWordsetSource(WordsetSource):
    """Row-scan of a CSV or TSV table; each row becomes one wordset.

    Columns default to every column in table order. Pass
    ``config.LEGACY_TABLE_COLUMNS`` to read the fixed nine-column layout.
    """

    def __init__(self, path: Path = config.WORDSETS_TABLE, columns: list[str] | None = None):
        self.path = Path(path)
        self.columns = columns

    def _read_table(self) -> pd.DataFrame:
        sep = "\t" if self.path.suffix == ".tsv" else ","
        return pd.read_csv(self.path, sep=sep)

    def load(self) -> list[Wordset]:
        logger = get_logger()

        if not self.path.exists():
            logger.warning(f"✗ Wordsets table not found: {self.path}")
            return []

        try:
            df = self._read_table()
        except (OSError, ValueError, pd.errors.ParserError) as e:
            logger.warning(f"✗ Failed to read {self.path.name}: {e}")
            return []

        columns = self.columns or list(df.columns)
        missing = [c for c in columns if c not in df.columns]
        if missing:
            logger.warning(f"✗ Table {self.path.name} is missing columns: {missing}")
            return []

        wordsets = []
        for _, row in df[columns].iterrows():
            words = [str(value).strip() for value in row if pd.notna(value) and str(value).strip()]
            if words:
                wordsets.append(words)

        logger.info(f"  Loaded {len(wordsets)} wordsets from table {self.path.name}")
        return wordsets
