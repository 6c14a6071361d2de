"""
JSON-file asset store.

All assets live in one document, ``<data_dir>/db.json``, which is read in full
and rewritten on every mutation.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from adinsights.schemas import Asset, StoreDocument
from adinsights.utils import now_utc

logger = logging.getLogger(__name__)

DB_FILENAME = "db.json"


class AssetStore:
    """
    Persists assets and their analysis results.

    Reads return fresh copies, so callers may modify what they get back and
    write it again with ``upsert``. A lock serialises read-modify-write cycles
    within the process.
    """

    def __init__(self, data_dir: Path | str):
        """
        Initialize the store, creating an empty document on first use.

        Args:
            data_dir: Directory holding the database file
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / DB_FILENAME
        self._lock = threading.RLock()

        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.db_path.exists():
            stamp = now_utc().isoformat()
            self._write(StoreDocument(assets=[], created_at=stamp, updated_at=stamp))
            logger.info("Created asset database at %s", self.db_path)

    def _read(self) -> StoreDocument:
        return StoreDocument.model_validate_json(self.db_path.read_text(encoding="utf-8"))

    def _write(self, document: StoreDocument) -> None:
        payload = document.model_dump_json(indent=2, by_alias=True, exclude_none=True)
        self.db_path.write_text(payload, encoding="utf-8")

    def _save(self, document: StoreDocument) -> None:
        document.updated_at = now_utc().isoformat()
        self._write(document)

    def list(self) -> List[Asset]:
        """All assets in insertion order."""
        with self._lock:
            return self._read().assets

    def get(self, asset_id: str) -> Optional[Asset]:
        """Look up one asset by id, None when unknown."""
        with self._lock:
            return next((asset for asset in self._read().assets if asset.id == asset_id), None)

    def upsert(self, asset: Asset) -> None:
        """Replace the asset with the same id in place, or append it."""
        with self._lock:
            document = self._read()
            for index, existing in enumerate(document.assets):
                if existing.id == asset.id:
                    document.assets[index] = asset
                    break
            else:
                document.assets.append(asset)
            self._save(document)

    def upsert_many(self, assets: Iterable[Asset]) -> None:
        """Upsert a batch with a single write; existing ids keep their position."""
        with self._lock:
            document = self._read()
            by_id = {existing.id: existing for existing in document.assets}
            for asset in assets:
                by_id[asset.id] = asset
            document.assets = list(by_id.values())
            self._save(document)

    def replace_all(self, assets: Iterable[Asset]) -> None:
        """Overwrite the stored asset list."""
        with self._lock:
            document = self._read()
            document.assets = list(assets)
            self._save(document)
