"""
jvm_types.py
============
Normalized data model shared by every stage of JVM discovery.

Contents:
  - Architecture      canonical CPU architecture tags + alias normalization
  - MetadataSource    which extraction method produced a record
  - JvmRecord         the immutable unit of discovery
  - guess_vendor()    vendor label heuristics for installation paths
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from jvm_version import JvmVersion

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "unknown"


# ──────────────────────────────────────────────
#  Architecture
# ──────────────────────────────────────────────

class Architecture(str, Enum):
    """Canonical architecture tags.

    Declaration order doubles as the preference order among non-native
    architectures when ranking.
    """

    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    X86 = "x86"
    ARM = "arm"
    PPC64LE = "ppc64le"
    S390X = "s390x"
    RISCV64 = "riscv64"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


# Lower-cased alias → canonical tag
_ARCH_ALIASES: Dict[str, Architecture] = {
    "x86_64": Architecture.X86_64,
    "x86-64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "x64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
    "x86": Architecture.X86,
    "x32": Architecture.X86,
    "i386": Architecture.X86,
    "i586": Architecture.X86,
    "i686": Architecture.X86,
    "arm": Architecture.ARM,
    "armv7": Architecture.ARM,
    "armv7l": Architecture.ARM,
    "aarch32": Architecture.ARM,
    "ppc64le": Architecture.PPC64LE,
    "ppc64el": Architecture.PPC64LE,
    "s390x": Architecture.S390X,
    "riscv64": Architecture.RISCV64,
    "unknown": Architecture.UNKNOWN,
}


def lookup_arch(text: Optional[str]) -> Optional[Architecture]:
    """Return the canonical tag for a known alias, or None."""
    if not text:
        return None
    return _ARCH_ALIASES.get(text.strip().strip("\"'").lower())


def normalize_arch(text: Optional[str]) -> Architecture:
    """
    Map an architecture string to its canonical tag.

    ``amd64`` and ``x86_64`` both become ``x86_64``; ``arm64`` becomes
    ``aarch64``. Unrecognised input maps to ``unknown``. Applying this to
    its own output returns the same tag.
    """
    if isinstance(text, Architecture):
        return text
    return lookup_arch(text) or Architecture.UNKNOWN


def host_architecture() -> Architecture:
    """Canonical architecture of the running interpreter's host."""
    return normalize_arch(platform.machine())


# ──────────────────────────────────────────────
#  Metadata Source
# ──────────────────────────────────────────────

class MetadataSource(str, Enum):
    """Extraction method that produced a record (diagnostics only)."""

    RELEASE = "release"
    PLIST = "plist"
    REGISTRY = "registry"
    DIRECTORY_NAME = "directory_name"

    def __str__(self) -> str:
        return self.value


# ──────────────────────────────────────────────
#  JvmRecord
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class JvmRecord:
    """A single discovered JVM installation."""

    path: str
    version: JvmVersion
    architecture: Architecture
    source: MetadataSource
    name: str = UNKNOWN_NAME

    def describe(self) -> str:
        """One-line detailed rendering: ``VERSION (ARCH) "NAME" - PATH``."""
        return f'{self.version} ({self.architecture}) "{self.name}" - {self.path}'

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "version": str(self.version),
            "architecture": self.architecture.value,
            "source": self.source.value,
        }


# ──────────────────────────────────────────────
#  Vendor heuristics
# ──────────────────────────────────────────────

# Checked in order; the first token found in the lower-cased text wins.
_VENDOR_TOKENS = (
    ("temurin", "Eclipse Temurin"),
    ("adoptium", "Eclipse Temurin"),
    ("adoptopenjdk", "AdoptOpenJDK"),
    ("zulu", "Zulu"),
    ("azul", "Zulu"),
    ("corretto", "Amazon Corretto"),
    ("graalvm", "GraalVM"),
    ("liberica", "BellSoft Liberica"),
    ("bellsoft", "BellSoft Liberica"),
    ("semeru", "IBM Semeru"),
    ("sapmachine", "SapMachine"),
    ("dragonwell", "Alibaba Dragonwell"),
    ("microsoft", "Microsoft"),
    ("jbr", "JetBrains Runtime"),
    ("oracle", "Oracle"),
    ("openjdk", "OpenJDK"),
)


def guess_vendor(text: str) -> str:
    """Guess a vendor label from a path or directory name."""
    lowered = text.lower()
    for token, label in _VENDOR_TOKENS:
        if token in lowered:
            return label
    return UNKNOWN_NAME
