"""
Snapshot persistence over an opaque key-value blob store.

The store only knows bytes. ProfilePersistence encodes the aggregate
snapshot as JSON; a blob that fails to decode is treated as absent.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from stride.profile.aggregate import GameRules, PlayerAggregate


logger = logging.getLogger(__name__)


DEFAULT_KEY = "stride.player"

# Anything a malformed snapshot can raise while decoding
SNAPSHOT_ERRORS = (ValueError, KeyError, TypeError, AttributeError, OverflowError)


class BlobStore:
    """Key-value store of byte blobs."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, data: bytes):
        raise NotImplementedError

    def delete(self, key: str):
        raise NotImplementedError


class MemoryBlobStore(BlobStore):
    """In-process store, for tests and previews."""

    def __init__(self):
        self._blobs: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def set(self, key: str, data: bytes):
        self._blobs[key] = bytes(data)

    def delete(self, key: str):
        self._blobs.pop(key, None)


class FileBlobStore(BlobStore):
    """One file per key under a directory, written atomically."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, data: bytes):
        path = self._path(key)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.tmp.",
        )
        try:
            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, path)
        except OSError:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def delete(self, key: str):
        path = self._path(key)
        if path.exists():
            path.unlink()


class ProfilePersistence:
    """Saves and loads PlayerAggregate snapshots."""

    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_KEY,
        rules_factory: Optional[Callable[[], GameRules]] = None,
    ):
        self.store = store
        self.key = key
        self.rules_factory = rules_factory or GameRules

    def encode(self, player: PlayerAggregate) -> bytes:
        return json.dumps(player.to_dict(), indent=2).encode("utf-8")

    def decode(self, data: bytes) -> PlayerAggregate:
        """
        Decode a snapshot blob.

        Raises:
            One of SNAPSHOT_ERRORS: On a malformed blob
        """
        return PlayerAggregate.from_dict(json.loads(data), self.rules_factory())

    def save(self, player: PlayerAggregate):
        self.store.set(self.key, self.encode(player))
        logger.debug(f"Saved player snapshot '{self.key}'")

    def load(self) -> Optional[PlayerAggregate]:
        """Stored aggregate, or None when absent or undecodable."""
        data = self.store.get(self.key)
        if data is None:
            return None
        try:
            return self.decode(data)
        except SNAPSHOT_ERRORS as e:
            logger.error(f"Failed to load player snapshot '{self.key}': {e}")
            return None

    def clear(self):
        self.store.delete(self.key)

    def export_data(self) -> Optional[bytes]:
        return self.store.get(self.key)

    def import_data(self, data: bytes) -> bool:
        """Store a blob only if it decodes."""
        try:
            self.decode(data)
        except SNAPSHOT_ERRORS as e:
            logger.error(f"Rejected player snapshot import: {e}")
            return False
        self.store.set(self.key, data)
        return True
