"""Persistent access-token cache scoped per profile.

Stores the last access token in
``~/.local/share/asacli/profiles/<profile>/token_cache.json`` (XDG) or the
platform-equivalent directory.  The file holds a serialised
:class:`~asacli.models.TokenRecord`::

    {"access_token": "...", "token_type": "Bearer", "expires_at": "2026-..."}

Files are written atomically with ``0o600`` permissions.  A missing or
corrupt file simply means "no cached token"; it is never an error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from asacli.config import atomic_write, get_profile_data_dir
from asacli.models import TokenRecord

CACHE_FILENAME = "token_cache.json"


class TokenCache:
    """Read/write the cached token for a single profile.

    Args:
        path: Location of the cache file.  Use :meth:`for_profile` to
            derive it from a profile name.

    Example::

        cache = TokenCache.for_profile("prod")
        cache.save(record)
        assert cache.load().access_token == record.access_token
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @classmethod
    def for_profile(cls, profile: Optional[str]) -> TokenCache:
        return cls(get_profile_data_dir(profile) / CACHE_FILENAME)

    @property
    def path(self) -> Path:
        """The filesystem path to this profile's token cache."""
        return self._path

    def load(self) -> Optional[TokenRecord]:
        """Load the cached record.

        Returns:
            The :class:`~asacli.models.TokenRecord`, or ``None`` if the file
            does not exist or cannot be parsed.
        """
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return TokenRecord.model_validate(data)
        except (json.JSONDecodeError, ValidationError, ValueError, OSError):
            return None

    def save(self, record: TokenRecord) -> None:
        """Persist *record*, replacing the whole file.

        Raises:
            OSError: If the file cannot be written.
        """
        data = record.model_dump(mode="json")
        atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)

    def clear(self) -> bool:
        """Delete the cache file.  Returns ``True`` if a file was removed."""
        if self._path.is_file():
            self._path.unlink()
            return True
        return False
