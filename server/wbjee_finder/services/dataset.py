"""Service for reading the ORCR dataset from disk."""

import json
import logging
from pathlib import Path
from typing import Optional

from ..errors import DatasetUnavailableError

logger = logging.getLogger(__name__)

DATA_CACHE_KEY = "orcr_data"


class DatasetLoader:
    """Read the dataset file as raw JSON bytes."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def size(self) -> Optional[int]:
        """Size of the dataset file in bytes, or None if it is missing."""
        try:
            return self.path.stat().st_size
        except OSError:
            return None

    def load(self) -> bytes:
        """Read and validate the dataset.

        The bytes are returned untouched so they can be cached and served
        verbatim; parsing only guards against serving a corrupt file.
        """
        try:
            payload = self.path.read_bytes()
            json.loads(payload)
        except (OSError, ValueError) as e:
            logger.exception("Error loading dataset from %s", self.path)
            raise DatasetUnavailableError() from e
        return payload
