"""
jvm_manager.py
==============
Discovery engine: walks candidate locations and collects JVM records.

Read-only. One pass per call, no retries: a candidate that cannot be
read is skipped for this invocation.
"""

from __future__ import annotations

import logging
import os
import platform
from typing import Callable, List, Optional, Sequence

from jvm_extractor import extract
from jvm_locations import Candidate, LocationEnumerator, build_enumerator
from jvm_selector import JvmFilter, select
from jvm_types import Architecture, JvmRecord, host_architecture

logger = logging.getLogger(__name__)

Extractor = Callable[[Candidate], Optional[JvmRecord]]


class JvmManager:
    """
    Discovers installed JVMs and picks the best match for a filter.

    Args:
        enumerator: source of candidate locations
        extractor:  candidate → optional record (defaults to ``extract``)
        host_arch:  architecture preferred when ranking (defaults to host)
    """

    def __init__(
        self,
        enumerator: LocationEnumerator,
        extractor: Extractor = extract,
        host_arch: Optional[Architecture] = None,
    ) -> None:
        self.enumerator = enumerator
        self.extractor = extractor
        self.host_arch = host_arch or host_architecture()

        logger.debug(
            "JvmManager init: system=%s arch=%s", platform.system(), self.host_arch,
        )

    @classmethod
    def for_host(cls, custom_roots: Sequence[str] = (), system: Optional[str] = None) -> "JvmManager":
        """Manager over this platform's default roots plus ``custom_roots``."""
        return cls(build_enumerator(custom_roots, system=system))

    # ================================================================
    #  DISCOVERY
    # ================================================================

    def discover(self) -> List[JvmRecord]:
        """
        Extract a record from every candidate location.

        A location reached twice (e.g. through a directory root and the
        registry, or through a symlink) is reported once, from the first
        occurrence that yields a record.
        """
        found: List[JvmRecord] = []
        seen_paths: set = set()

        for candidate in self.enumerator.locations():
            normalized = os.path.normcase(os.path.realpath(candidate.path))
            if normalized in seen_paths:
                continue

            record = self.extractor(candidate)
            if record is None:
                continue
            seen_paths.add(normalized)
            found.append(record)
            logger.info(
                "Detected %s %s (%s) at %s [%s]",
                record.name, record.version, record.architecture, record.path, record.source,
            )

        logger.info("Total detected: %d JVM installations", len(found))
        return found

    # ================================================================
    #  SELECTION
    # ================================================================

    def find(self, jvm_filter: Optional[JvmFilter] = None) -> List[JvmRecord]:
        """Discover, filter and rank best-first."""
        return select(self.discover(), jvm_filter, self.host_arch)
