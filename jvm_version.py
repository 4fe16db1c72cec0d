"""
jvm_version.py
==============
Java version values: parsing, legacy normalization, comparison, filtering.

Java has two numbering schemes:
  - legacy  ``1.x``  (``1.8.0_331`` is Java 8 update 331)
  - modern  ``x``    (``17.0.2+8``)

Normalization and comparison are kept as separate functions:
``normalize_legacy()`` rewrites ``1.8.0`` to ``8.0``; ``compare_versions()``
compares two values after normalizing them.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from itertools import zip_longest
from typing import Optional, Tuple

_COMPONENTS_RE = re.compile(r"\d+(?:\.\d+)*")
_LEADING_DIGITS_RE = re.compile(r"\d+")
_FILTER_RE = re.compile(r"^\d+(?:\.\d+)*\+?$")


# ──────────────────────────────────────────────
#  Normalization
# ──────────────────────────────────────────────

def normalize_legacy(components: Tuple[int, ...]) -> Tuple[int, ...]:
    """
    Drop the legacy ``1.`` prefix.

    ``(1, 8, 0)`` → ``(8, 0)``; ``(1, 8)`` → ``(8,)``; ``(17, 0, 2)`` and a
    bare ``(1,)`` are returned unchanged.
    """
    if len(components) > 1 and components[0] == 1:
        return components[1:]
    return components


def _build_number(build: Optional[str]) -> int:
    if not build:
        return 0
    match = _LEADING_DIGITS_RE.match(build)
    return int(match.group()) if match else 0


# ──────────────────────────────────────────────
#  Version value
# ──────────────────────────────────────────────

@functools.total_ordering
@dataclass(frozen=True, eq=False)
class JvmVersion:
    """
    A parsed Java version.

    Attributes:
        components: integer components as written (``(1, 8, 0)``)
        build:      suffix after ``_``, ``+`` or ``-`` (``"331"``, ``"8"``)
        text:       the original string, used when rendering
    """

    components: Tuple[int, ...]
    build: Optional[str] = None
    text: str = ""

    @property
    def normalized(self) -> Tuple[int, ...]:
        """Components with the legacy ``1.`` prefix removed."""
        return normalize_legacy(self.components)

    @property
    def major(self) -> int:
        return self.normalized[0]

    def __str__(self) -> str:
        if self.text:
            return self.text
        rendered = ".".join(str(c) for c in self.components)
        return f"{rendered}_{self.build}" if self.build else rendered

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JvmVersion):
            return NotImplemented
        return compare_versions(self, other) == 0

    def __lt__(self, other: "JvmVersion") -> bool:
        if not isinstance(other, JvmVersion):
            return NotImplemented
        return compare_versions(self, other) < 0

    def __hash__(self) -> int:
        trimmed = list(self.normalized)
        while trimmed and trimmed[-1] == 0:
            trimmed.pop()
        return hash((tuple(trimmed), _build_number(self.build)))


def parse_version(text: Optional[str]) -> Optional[JvmVersion]:
    """
    Parse a version string tolerantly.

    Accepts ``17``, ``17.0.2``, ``1.8.0_331``, ``11.0.18+10``, ``"21"`` (with
    quotes) and ``17.0.2-ea``. Returns None when the string does not start
    with a numeric component.
    """
    if text is None:
        return None
    cleaned = text.strip().strip("\"'").strip()
    if cleaned[:1] in ("v", "V"):
        cleaned = cleaned[1:]
    match = _COMPONENTS_RE.match(cleaned)
    if not match:
        return None
    components = tuple(int(part) for part in match.group().split("."))
    build = cleaned[match.end():].lstrip("._+- ") or None
    return JvmVersion(components=components, build=build, text=cleaned)


# ──────────────────────────────────────────────
#  Comparison
# ──────────────────────────────────────────────

def compare_components(a: Tuple[int, ...], b: Tuple[int, ...]) -> int:
    """Compare component tuples, padding the shorter one with zeros."""
    for left, right in zip_longest(a, b, fillvalue=0):
        if left != right:
            return -1 if left < right else 1
    return 0


def compare_versions(a: JvmVersion, b: JvmVersion) -> int:
    """
    Total order over versions: -1, 0 or 1.

    Legacy-normalized components are compared first (``11`` == ``11.0.0``),
    then the numeric prefix of the build suffix (missing counts as 0).
    """
    result = compare_components(a.normalized, b.normalized)
    if result:
        return result
    left, right = _build_number(a.build), _build_number(b.build)
    if left != right:
        return -1 if left < right else 1
    return 0


# ──────────────────────────────────────────────
#  Version filter
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class VersionFilter:
    """
    A user-supplied version constraint.

    ``"11"``  exact-prefix mode: matches 11, 11.0.2, 11.0.18+10
    ``"11+"`` minimum mode: matches anything >= 11.0.0
    """

    components: Tuple[int, ...]
    minimum: bool = False
    text: str = ""

    @classmethod
    def parse(cls, text: str) -> "VersionFilter":
        cleaned = text.strip()
        if not _FILTER_RE.match(cleaned):
            raise ValueError(
                f"invalid version filter {text!r} (expected e.g. 1.8, 11, 17.0.2 or 11+)"
            )
        minimum = cleaned.endswith("+")
        digits = cleaned.rstrip("+")
        components = normalize_legacy(tuple(int(p) for p in digits.split(".")))
        return cls(components=components, minimum=minimum, text=cleaned)

    def matches(self, version: JvmVersion) -> bool:
        candidate = version.normalized
        if self.minimum:
            return compare_components(candidate, self.components) >= 0
        width = len(self.components)
        padded = tuple(candidate) + (0,) * max(0, width - len(candidate))
        return padded[:width] == self.components

    def __str__(self) -> str:
        return self.text
