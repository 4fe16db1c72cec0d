"""
jvm_locations.py
================
Enumerates candidate JVM installation locations.

Sources:
  - Platform default roots, expanded one level (one child per JVM)
  - Windows registry (``HKLM\\SOFTWARE\\JavaSoft\\...``), one candidate per subkey
  - User-registered custom roots, expanded one level

Cross-platform notes:
  macOS    – /Library/Java/JavaVirtualMachines, ~/Library/Java/JavaVirtualMachines
  Linux    – /usr/lib/jvm, /usr/java, /opt/java, SDKMAN, ~/.jdks
  Windows  – Program Files vendor folders + registry
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
#  Candidate
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class RegistryEntry:
    """Values read from one JavaSoft registry subkey."""

    key: str                       # Full key path, for diagnostics
    version: str                   # Subkey name or its JavaVersion value
    wow64: bool = False            # True when read from WOW6432Node (32-bit view)


@dataclass(frozen=True)
class Candidate:
    """A directory that may hold a JVM installation."""

    path: str
    registry: Optional[RegistryEntry] = None


class LocationEnumerator(Protocol):
    """Anything that can list candidate JVM locations."""

    def locations(self) -> Iterator[Candidate]:
        ...


# ──────────────────────────────────────────────
#  Filesystem roots
# ──────────────────────────────────────────────

class DirectoryEnumerator:
    """
    Expands each root one level: every immediate child directory is a
    candidate. Missing or unreadable roots are skipped.
    """

    def __init__(self, roots: Iterable[str]) -> None:
        self.roots: List[str] = [os.path.expanduser(r) for r in roots]

    def locations(self) -> Iterator[Candidate]:
        for root in self.roots:
            if not os.path.isdir(root):
                logger.debug("Skipping missing root %s", root)
                continue
            try:
                entries = sorted(os.listdir(root))
            except OSError as exc:
                logger.debug("Skipping unreadable root %s: %s", root, exc)
                continue
            for entry in entries:
                full_path = os.path.join(root, entry)
                if os.path.isdir(full_path):
                    yield Candidate(path=os.path.abspath(full_path))

    def __repr__(self) -> str:
        return f"DirectoryEnumerator({self.roots!r})"


# ──────────────────────────────────────────────
#  Windows registry
# ──────────────────────────────────────────────

REGISTRY_KEYS: Tuple[str, ...] = (
    r"SOFTWARE\JavaSoft\JDK",
    r"SOFTWARE\JavaSoft\Java Development Kit",
    r"SOFTWARE\JavaSoft\JRE",
    r"SOFTWARE\JavaSoft\Java Runtime Environment",
)


class RegistryEnumerator:
    """
    Lists JVMs registered under HKLM\\SOFTWARE\\JavaSoft.

    Each subkey carrying a ``JavaHome`` value is one candidate; the subkey
    name (or its ``JavaVersion`` value) travels with it as registry metadata.
    Both the native and the 32-bit (WOW6432Node) views are read.
    """

    def __init__(self, keys: Sequence[str] = REGISTRY_KEYS) -> None:
        self.keys = tuple(keys)

    def locations(self) -> Iterator[Candidate]:
        try:
            import winreg
        except ImportError:
            logger.debug("winreg unavailable; registry enumeration skipped")
            return

        views = (
            (winreg.KEY_WOW64_64KEY, False),
            (winreg.KEY_WOW64_32KEY, True),
        )
        for key_path in self.keys:
            for view_flag, wow64 in views:
                yield from self._read_key(winreg, key_path, view_flag, wow64)

    @staticmethod
    def _read_key(winreg, key_path: str, view_flag: int, wow64: bool) -> Iterator[Candidate]:
        try:
            root = winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE, key_path, 0, winreg.KEY_READ | view_flag,
            )
        except OSError:
            return
        try:
            for index in range(winreg.QueryInfoKey(root)[0]):
                try:
                    name = winreg.EnumKey(root, index)
                    with winreg.OpenKey(root, name) as sub:
                        java_home, _ = winreg.QueryValueEx(sub, "JavaHome")
                        try:
                            version, _ = winreg.QueryValueEx(sub, "JavaVersion")
                        except OSError:
                            version = name
                except OSError as exc:
                    logger.debug("Skipping registry subkey %s[%d]: %s", key_path, index, exc)
                    continue
                if not java_home or not os.path.isdir(java_home):
                    continue
                yield Candidate(
                    path=os.path.abspath(java_home),
                    registry=RegistryEntry(
                        key=f"{key_path}\\{name}", version=str(version), wow64=wow64,
                    ),
                )
        finally:
            winreg.CloseKey(root)


# ──────────────────────────────────────────────
#  Composition
# ──────────────────────────────────────────────

class CompositeEnumerator:
    """Chains enumerators, preserving their order."""

    def __init__(self, parts: Iterable[LocationEnumerator]) -> None:
        self.parts: List[LocationEnumerator] = list(parts)

    def locations(self) -> Iterator[Candidate]:
        for part in self.parts:
            yield from part.locations()


def default_roots(system: Optional[str] = None) -> List[str]:
    """Return default JVM install roots for ``system`` (``platform.system()``)."""
    system = system or platform.system()
    home = os.path.expanduser("~")

    if system == "Darwin":
        return [
            "/Library/Java/JavaVirtualMachines",
            os.path.join(home, "Library", "Java", "JavaVirtualMachines"),
            "/System/Library/Java/JavaVirtualMachines",
        ]

    if system == "Windows":
        program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
        program_files_x86 = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
        return [
            os.path.join(program_files, "Java"),
            os.path.join(program_files, "Eclipse Adoptium"),
            os.path.join(program_files, "Eclipse Foundation"),
            os.path.join(program_files, "AdoptOpenJDK"),
            os.path.join(program_files, "Microsoft"),
            os.path.join(program_files, "Zulu"),
            os.path.join(program_files, "BellSoft"),
            os.path.join(program_files, "Amazon Corretto"),
            os.path.join(program_files_x86, "Java"),
            os.path.join(home, ".jdks"),
        ]

    return [
        "/usr/lib/jvm",
        "/usr/java",
        "/opt/java",
        os.path.join(home, ".sdkman", "candidates", "java"),
        os.path.join(home, ".jdks"),
    ]


def build_enumerator(
    custom_roots: Sequence[str] = (),
    system: Optional[str] = None,
) -> CompositeEnumerator:
    """
    Assemble the enumerator for this host.

    Order: default roots, then the registry (Windows only), then custom
    roots in registration order.
    """
    system = system or platform.system()
    parts: List[LocationEnumerator] = [DirectoryEnumerator(default_roots(system))]
    if system == "Windows" and sys.platform == "win32":
        parts.append(RegistryEnumerator())
    if custom_roots:
        parts.append(DirectoryEnumerator(custom_roots))
    logger.debug("Enumerator for %s: %s", system, parts)
    return CompositeEnumerator(parts)
