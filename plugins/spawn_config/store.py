"""CatalogStore — JSON persistence for the spawn catalog.

Loading fails soft: a missing, unreadable or malformed document is
replaced by the default ``{"enabled": false, "spawns": []}`` and written
back straight away, so the file on disk is always valid after load().
Saves go through a temp file in the same directory and ``os.replace``.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .catalog import Catalog, CatalogDocument


class CatalogLoadError(Exception):
    """Raised when the config document cannot be parsed or validated."""


class CatalogStore:
    """Reads and writes the spawn config document."""

    def __init__(self, path: str | Path):
        """Initialize the store.

        Args:
            path: Location of the JSON config document
        """
        self.path = Path(path)

    def load(self) -> Catalog:
        """Load the catalog, resetting the document on any failure.

        Returns:
            The loaded Catalog, or a disabled empty one if the document was
            missing or invalid.  Either way the result is re-saved; a failed
            write is logged and does not raise.
        """
        if not self.path.exists():
            logger.info(f"No spawn config at {self.path}; writing defaults")
            catalog = Catalog()
        else:
            try:
                catalog = Catalog.from_document(self._read_document())
                logger.info(
                    f"Loaded {len(catalog)} spawn entries from {self.path.name} "
                    f"(enabled={catalog.enabled})"
                )
            except CatalogLoadError as e:
                logger.warning(
                    f"Configuration file {self.path.name} is invalid; using defaults ({e})"
                )
                catalog = Catalog()

        try:
            self.save(catalog)
        except OSError as e:
            logger.warning(f"Could not write spawn config to {self.path}: {e}")
        return catalog

    def save(self, catalog: Catalog) -> None:
        """Write the full catalog atomically (tmp -> fsync -> replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(catalog.to_document().dump(), indent=2)

        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Saved {len(catalog)} spawn entries to {self.path}")

    def _read_document(self) -> CatalogDocument:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CatalogLoadError(str(e)) from e

        if raw is None:
            raise CatalogLoadError("document is empty")
        try:
            return CatalogDocument.model_validate(raw)
        except ValidationError as e:
            raise CatalogLoadError(f"{e.error_count()} validation error(s)") from e
