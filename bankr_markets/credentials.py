"""
API key storage.

One slot, one key. The durable store is a dotenv-format file readable only
by the current user, so the key survives restarts and can be inspected or
edited by hand.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key, unset_key

from bankr_markets.errors import StorageError

logger = logging.getLogger(__name__)

MASK = "••••••••"


class CredentialStore:
    """Holds at most one API key."""

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def has(self) -> bool:
        return bool(self.get())


class InMemoryCredentialStore(CredentialStore):
    """Process-local store. Gone when the process exits."""

    def __init__(self, key: Optional[str] = None):
        self._key = key

    def get(self) -> Optional[str]:
        return self._key

    def set(self, key: str) -> None:
        self._key = key

    def clear(self) -> None:
        self._key = None


class DotenvCredentialStore(CredentialStore):
    """
    Key kept in a dotenv file, e.g. ~/.bankr/credentials:

        BANKR_API_KEY='bk_...'

    I/O problems raise StorageError. A missing file just means no key.
    """

    def __init__(self, path, key_name: str = "BANKR_API_KEY"):
        self.path = Path(path).expanduser()
        self.key_name = key_name

    def get(self) -> Optional[str]:
        try:
            if not self.path.exists():
                return None
            return self._read()
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

    def _read(self) -> Optional[str]:
        return dotenv_values(self.path).get(self.key_name)

    def set(self, key: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
            if not self.path.exists():
                self.path.touch(mode=0o600)
            set_key(self.path, self.key_name, key)
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.info("API key saved to %s", self.path)

    def clear(self) -> None:
        try:
            if self.path.exists() and self._read() is not None:
                unset_key(self.path, self.key_name)
        except OSError as e:
            raise StorageError(f"Could not update {self.path}: {e}") from e
        logger.info("API key removed from %s", self.path)


def mask_credential(key: Optional[str]) -> str:
    """Show only the last 8 characters of a key."""
    if not key:
        return ""
    return MASK + key[-8:]
