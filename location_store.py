"""
location_store.py
=================
Persisted list of user-registered JVM search roots.

Stored as ``locations.json`` in the user's configuration directory::

    {
      "locations": ["/opt/jvms", "/home/me/jdks"]
    }

Paths are kept absolute, in registration order, without duplicates.
Every mutation is written back immediately.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

APP_NAME = "jvm-finder"
STORE_FILENAME = "locations.json"
CONFIG_ENV_VAR = "JVM_FINDER_CONFIG"


class LocationStoreError(Exception):
    """The store file could not be read or written."""


# ──────────────────────────────────────────────
#  Result Object
# ──────────────────────────────────────────────

@dataclass
class Result:
    """Unified result for store management operations."""

    success: bool
    message: str
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **details: Any) -> "Result":
        return cls(success=True, message=message, details=details)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None, **details: Any) -> "Result":
        return cls(success=False, message=message, error=error, details=details)


def default_store_path(system: Optional[str] = None) -> Path:
    """
    Resolve where the store lives.

    ``$JVM_FINDER_CONFIG`` wins; otherwise the platform's per-user
    configuration directory is used.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    system = system or platform.system()
    home = Path.home()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
    elif system == "Darwin":
        base = home / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")
    return base / APP_NAME / STORE_FILENAME


def _normalize(path: str | Path) -> str:
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))


class LocationStore:
    """
    Ordered, duplicate-free set of custom search roots.

    Args:
        path: JSON file backing the store (created on first write)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._locations: List[str] = []
        self.load()

    @property
    def locations(self) -> List[str]:
        return list(self._locations)

    # ================================================================
    #  PERSISTENCE
    # ================================================================

    def load(self) -> List[str]:
        """Read the store file. A missing file is an empty store."""
        if not self.path.exists():
            self._locations = []
            return self.locations
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise LocationStoreError(f"Could not read {self.path}: {exc}") from exc

        raw = data.get("locations", []) if isinstance(data, dict) else None
        if not isinstance(raw, list):
            raise LocationStoreError(f"Malformed location store {self.path}")

        self._locations = []
        for entry in raw:
            if isinstance(entry, str) and entry:
                normalized = _normalize(entry)
                if normalized not in self._locations:
                    self._locations.append(normalized)
        logger.debug("Loaded %d custom locations from %s", len(self._locations), self.path)
        return self.locations

    def persist(self) -> None:
        """Write the store file, creating parent directories as needed."""
        data = {"locations": self._locations}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
                fh.write("\n")
        except OSError as exc:
            raise LocationStoreError(f"Could not write {self.path}: {exc}") from exc
        logger.debug("Saved %d custom locations to %s", len(self._locations), self.path)

    # ================================================================
    #  MUTATION
    # ================================================================

    def add(self, path: str | Path) -> Result:
        """Register a search root (no-op if already present)."""
        normalized = _normalize(path)
        if normalized in self._locations:
            return Result.ok(f"Location already registered: {normalized}", path=normalized, changed=False)

        if not os.path.isdir(normalized):
            logger.warning("Registering %s, which is not currently a directory", normalized)

        self._locations.append(normalized)
        try:
            self.persist()
        except LocationStoreError as exc:
            self._locations.remove(normalized)
            return Result.fail(f"Failed to register {normalized}", error=str(exc), path=normalized)

        logger.info("Registered location %s", normalized)
        return Result.ok(f"Registered location: {normalized}", path=normalized, changed=True)

    def remove(self, path: str | Path) -> Result:
        """Unregister a search root (no-op if absent)."""
        normalized = _normalize(path)
        if normalized not in self._locations:
            return Result.ok(f"Location not registered: {normalized}", path=normalized, changed=False)

        index = self._locations.index(normalized)
        del self._locations[index]
        try:
            self.persist()
        except LocationStoreError as exc:
            self._locations.insert(index, normalized)
            return Result.fail(f"Failed to remove {normalized}", error=str(exc), path=normalized)

        logger.info("Removed location %s", normalized)
        return Result.ok(f"Removed location: {normalized}", path=normalized, changed=True)
