"""
jvm_selector.py
===============
Filters discovered JVMs and orders them best-first.

Ranking (descending):
  1. version                       (11 == 11.0.0, 1.8 == 8)
  2. host architecture first       (others in Architecture declaration order)
  3. discovery order               (stable sort)
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from jvm_types import Architecture, JvmRecord, host_architecture, normalize_arch
from jvm_version import VersionFilter, compare_versions

logger = logging.getLogger(__name__)

_ARCH_ORDER = {arch: index for index, arch in enumerate(Architecture)}


@dataclass(frozen=True)
class JvmFilter:
    """User-supplied criteria; every supplied criterion must hold."""

    name: Optional[str] = None
    version: Optional[VersionFilter] = None
    arch: Optional[Architecture] = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.version is None and self.arch is None


def matches(record: JvmRecord, jvm_filter: JvmFilter) -> bool:
    """Return True if ``record`` satisfies every criterion of ``jvm_filter``."""
    if jvm_filter.name is not None:
        if jvm_filter.name.casefold() not in record.name.casefold():
            return False
    if jvm_filter.arch is not None:
        if normalize_arch(jvm_filter.arch) is not record.architecture:
            return False
    if jvm_filter.version is not None:
        if not jvm_filter.version.matches(record.version):
            return False
    return True


def rank(records: Sequence[JvmRecord], host_arch: Optional[Architecture] = None) -> List[JvmRecord]:
    """Order records best-first. Equal records keep their input order."""
    host_arch = host_arch or host_architecture()

    def _compare(a: JvmRecord, b: JvmRecord) -> int:
        by_version = compare_versions(b.version, a.version)
        if by_version:
            return by_version
        return _arch_rank(a.architecture, host_arch) - _arch_rank(b.architecture, host_arch)

    return sorted(records, key=functools.cmp_to_key(_compare))


def _arch_rank(arch: Architecture, host_arch: Architecture) -> int:
    if arch is host_arch:
        return -1
    return _ARCH_ORDER[arch]


def select(
    records: Sequence[JvmRecord],
    jvm_filter: Optional[JvmFilter] = None,
    host_arch: Optional[Architecture] = None,
) -> List[JvmRecord]:
    """Filter then rank. The result is always a subset of ``records``."""
    jvm_filter = jvm_filter or JvmFilter()
    if jvm_filter.is_empty:
        kept = list(records)
    else:
        kept = [r for r in records if matches(r, jvm_filter)]
    logger.debug("Filter %s kept %d of %d JVMs", jvm_filter, len(kept), len(records))
    return rank(kept, host_arch)
