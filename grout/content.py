"""Quotes and jokes loaded once from YAML files."""

import random
from enum import Enum
from pathlib import Path

import yaml
from loguru import logger

from .exceptions import ConfigurationError, ContentNotFoundError

DATA_DIR = Path(__file__).parent / "data"


class ContentKind(str, Enum):
    QUOTE = "quote"
    JOKE = "joke"


def _load_collection(path: Path) -> dict[str, list[str]]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load content from {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must map categories to lists of text")
    return {
        str(category): [str(item) for item in items or []]
        for category, items in raw.items()
    }


class ContentRepository:
    """Read-only collection of quotes and jokes grouped by category."""

    def __init__(
        self,
        quotes: dict[str, list[str]],
        jokes: dict[str, list[str]],
        rng: random.Random | None = None,
    ) -> None:
        self._data = {ContentKind.QUOTE: quotes, ContentKind.JOKE: jokes}
        self._rng = rng or random.Random()

    @classmethod
    def from_files(
        cls,
        quotes_path: str | Path | None = None,
        jokes_path: str | Path | None = None,
    ) -> "ContentRepository":
        """Load content, defaulting to the bundled data files.

        Raises:
            ConfigurationError: If a file is missing or malformed.
        """
        quotes = _load_collection(Path(quotes_path or DATA_DIR / "quotes.yaml"))
        jokes = _load_collection(Path(jokes_path or DATA_DIR / "jokes.yaml"))
        logger.info(
            f"Loaded {sum(map(len, quotes.values()))} quotes and "
            f"{sum(map(len, jokes.values()))} jokes"
        )
        return cls(quotes, jokes)

    @classmethod
    def load_default(cls) -> "ContentRepository":
        """Load the quotes and jokes bundled with the package."""
        return cls.from_files()

    def _collection(self, kind: ContentKind | str) -> tuple[str, dict[str, list[str]]]:
        try:
            resolved = ContentKind(kind)
        except ValueError as e:
            raise ContentNotFoundError(f"invalid content type: {kind}") from e
        return resolved.value, self._data[resolved]

    def get_random(self, kind: ContentKind | str, category: str = "") -> str:
        """Pick a random item from ``category``, or from every category when empty.

        Raises:
            ContentNotFoundError: If the kind is unknown or the category is
                missing or empty.
        """
        name, data = self._collection(kind)
        if category:
            items = data.get(category)
            if not items:
                raise ContentNotFoundError(f"{name} category '{category}' not found or empty")
        else:
            items = [item for group in data.values() for item in group]
            if not items:
                raise ContentNotFoundError(f"no {name} content available")
        return self._rng.choice(items)

    def get_categories(self, kind: ContentKind | str) -> list[str]:
        try:
            return list(self._data[ContentKind(kind)])
        except ValueError:
            return []
