"""
jvm_extractor.py
================
Turns one candidate location into at most one JvmRecord.

Strategies, tried in priority order (first success wins, no merging):
  1. ``release`` descriptor          (KEY="value" text file)
  2. ``Contents/Info.plist``         (macOS bundle metadata, XML or binary)
  3. Registry metadata               (Windows, carried on the candidate)
  4. Directory-name heuristic        (``jdk-17.0.2``, ``jdk1.8.0_331.jdk``)

A strategy that cannot produce a parseable version returns None and the
next one is tried. Errors never escape ``extract()``: one malformed
installation must not abort discovery of the others.
"""

from __future__ import annotations

import logging
import os
import plistlib
import re
from typing import Callable, Dict, List, Optional, Tuple
from xml.parsers.expat import ExpatError

from jvm_locations import Candidate
from jvm_types import (
    UNKNOWN_NAME,
    Architecture,
    JvmRecord,
    MetadataSource,
    guess_vendor,
    host_architecture,
    lookup_arch,
    normalize_arch,
)
from jvm_version import parse_version

logger = logging.getLogger(__name__)

# Relative locations of each metadata file inside an installation
RELEASE_FILES: Tuple[str, ...] = ("release", os.path.join("Contents", "Home", "release"))
PLIST_FILE = os.path.join("Contents", "Info.plist")

# What plistlib.load raises on malformed input (bad <date>, <integer>, <data>, nesting)
PLIST_ERRORS = (
    plistlib.InvalidFileException,
    ExpatError,
    ValueError,
    AttributeError,
    TypeError,
    KeyError,
    IndexError,
    OverflowError,
    RecursionError,
)

# Version-looking run inside a directory name
_DIRNAME_VERSION_RE = re.compile(r"(?<![\d.])(\d+(?:\.\d+)*)(?:_(\d+))?")
_DIRNAME_TOKEN_RE = re.compile(r"[^a-z0-9_]+")

Strategy = Callable[[Candidate], Optional[JvmRecord]]


def _clean(value: Optional[str]) -> str:
    return (value or "").strip().strip("\"'").strip()


# ──────────────────────────────────────────────
#  1. Release descriptor
# ──────────────────────────────────────────────

def parse_release(text: str) -> Dict[str, str]:
    """
    Parse a ``release`` file into a dict.

    Tolerates blank lines, ``#`` comments, whitespace around ``=`` and
    single or double quotes around values. Lines without ``=`` are ignored.
    """
    properties: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            properties[key] = _clean(value)
    return properties


def from_release(candidate: Candidate) -> Optional[JvmRecord]:
    for relative in RELEASE_FILES:
        release_path = os.path.join(candidate.path, relative)
        if not os.path.isfile(release_path):
            continue
        with open(release_path, "r", encoding="utf-8", errors="replace") as fh:
            properties = parse_release(fh.read())

        version = parse_version(properties.get("JAVA_VERSION")) or parse_version(
            properties.get("JAVA_RUNTIME_VERSION")
        )
        if version is None:
            logger.debug("No usable JAVA_VERSION in %s", release_path)
            continue

        os_arch = properties.get("OS_ARCH")
        arch = normalize_arch(os_arch) if os_arch else host_architecture()
        return JvmRecord(
            path=candidate.path,
            version=version,
            architecture=arch,
            source=MetadataSource.RELEASE,
            name=properties.get("IMPLEMENTOR") or UNKNOWN_NAME,
        )
    return None


# ──────────────────────────────────────────────
#  2. Property list
# ──────────────────────────────────────────────

def from_plist(candidate: Candidate) -> Optional[JvmRecord]:
    plist_path = os.path.join(candidate.path, PLIST_FILE)
    if not os.path.isfile(plist_path):
        return None
    try:
        with open(plist_path, "rb") as fh:
            info = plistlib.load(fh)
    except PLIST_ERRORS as exc:
        logger.debug("Unreadable property list %s: %s", plist_path, exc)
        return None
    if not isinstance(info, dict):
        return None

    java_vm = info.get("JavaVM")
    if not isinstance(java_vm, dict):
        java_vm = {}

    version = parse_version(_str_or_none(java_vm.get("JVMVersion"))) or parse_version(
        _str_or_none(info.get("CFBundleVersion"))
    )
    if version is None:
        logger.debug("No usable version in %s", plist_path)
        return None

    arch = lookup_arch(_str_or_none(java_vm.get("JVMArch")))
    if arch is None:
        priority = info.get("LSArchitecturePriority")
        if isinstance(priority, list) and priority:
            arch = lookup_arch(_str_or_none(priority[0]))

    return JvmRecord(
        path=candidate.path,
        version=version,
        architecture=arch or host_architecture(),
        source=MetadataSource.PLIST,
        name=_clean(_str_or_none(info.get("CFBundleName"))) or UNKNOWN_NAME,
    )


def _str_or_none(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


# ──────────────────────────────────────────────
#  3. Registry
# ──────────────────────────────────────────────

def from_registry(candidate: Candidate) -> Optional[JvmRecord]:
    entry = candidate.registry
    if entry is None:
        return None
    version = parse_version(entry.version)
    if version is None:
        return None
    return JvmRecord(
        path=candidate.path,
        version=version,
        architecture=Architecture.X86 if entry.wow64 else host_architecture(),
        source=MetadataSource.REGISTRY,
        name=guess_vendor(candidate.path),
    )


# ──────────────────────────────────────────────
#  4. Directory-name heuristic
# ──────────────────────────────────────────────

# Aliases that are unambiguous as substrings; shorter ones (x64, arm) only
# count as whole tokens.
_DIRNAME_ARCH_ALIASES: Tuple[str, ...] = (
    "x86_64", "x86-64", "amd64", "aarch64", "arm64", "ppc64le", "ppc64el", "s390x", "riscv64",
)


def parse_directory_name(dirname: str) -> Tuple[Optional[str], Optional[Architecture]]:
    """
    Pull a version string and an architecture hint out of a directory name.

    ``jdk-17.0.2``            → ("17.0.2", None)
    ``jdk1.8.0_331.jdk``      → ("1.8.0_331", None)
    ``java-11-openjdk-amd64`` → ("11", x86_64)
    """
    lowered = dirname.lower()
    arch = None
    for alias in _DIRNAME_ARCH_ALIASES:
        if alias in lowered:
            arch = arch or lookup_arch(alias)
            # Keep the digits of x86_64 & co. out of the version search
            lowered = lowered.replace(alias, " ")
    if arch is None:
        for token in _DIRNAME_TOKEN_RE.split(lowered):
            found = lookup_arch(token)
            if found is not None and found is not Architecture.UNKNOWN:
                arch = found
                break

    match = _DIRNAME_VERSION_RE.search(lowered)
    if not match:
        return None, arch
    version = match.group(1)
    if match.group(2):
        version = f"{version}_{match.group(2)}"
    return version, arch


def from_directory_name(candidate: Candidate) -> Optional[JvmRecord]:
    dirname = os.path.basename(os.path.normpath(candidate.path))
    version_text, arch = parse_directory_name(dirname)
    version = parse_version(version_text)
    if version is None:
        return None
    return JvmRecord(
        path=candidate.path,
        version=version,
        architecture=arch or host_architecture(),
        source=MetadataSource.DIRECTORY_NAME,
        name=guess_vendor(dirname),
    )


# ──────────────────────────────────────────────
#  Dispatch
# ──────────────────────────────────────────────

STRATEGIES: List[Strategy] = [
    from_release,
    from_plist,
    from_registry,
    from_directory_name,
]


def extract(candidate: Candidate, strategies: Optional[List[Strategy]] = None) -> Optional[JvmRecord]:
    """
    Produce zero or one record for ``candidate``.

    Args:
        candidate:  location to inspect
        strategies: override the default priority list (tests)
    """
    for strategy in strategies or STRATEGIES:
        try:
            record = strategy(candidate)
        except (OSError, ValueError, ExpatError, UnicodeError) as exc:
            logger.debug("%s failed for %s: %s", strategy.__name__, candidate.path, exc)
            continue
        if record is not None:
            logger.debug(
                "Extracted %s (%s) from %s via %s",
                record.version, record.architecture, record.path, record.source,
            )
            return record

    logger.debug("No metadata found in %s", candidate.path)
    return None
