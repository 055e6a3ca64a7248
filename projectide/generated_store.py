"""
Generated File Store

Session-scoped collection of generated files, unique by
(project name, file name, version).
"""

import logging
import re
import threading
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .clock import Clock, now_millis
from .models import CandidateFile, GeneratedFile

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def version_sort_key(version: str) -> Tuple:
    """
    Numeric-aware sort key for version strings.

    Digit runs compare as integers, so '1.0.10' sorts after '1.0.9'.
    Other runs compare case-insensitively.
    """
    key = []
    for part in _DIGITS.split(version):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part), ""))
        else:
            key.append((1, 0, part.casefold()))
    return tuple(key)


class GeneratedFileStore:
    """
    In-memory store of generated files.

    Inserting a record whose composite key is already present is a no-op, so
    replaying the same AI reply is safe. The grouped view is rebuilt from the
    flat collection on every call.
    """

    def __init__(self, clock: Clock = now_millis):
        self._clock = clock
        # composite key -> record, in insertion order
        self._index: Dict[Tuple[str, str, str], GeneratedFile] = {}
        self._lock = threading.Lock()

    def insert(self, candidate: CandidateFile) -> Optional[GeneratedFile]:
        """
        Store a candidate.

        Returns:
            The stored record, or None if a record with the same
            (project, file, version) was already present.
        """
        with self._lock:
            if candidate.key in self._index:
                logger.debug(
                    f"Ignoring duplicate {candidate.project_name}/"
                    f"{candidate.file_name} v{candidate.version}"
                )
                return None

            record = GeneratedFile(
                id=(
                    f"{candidate.project_name}-{candidate.file_name}-"
                    f"{candidate.version}-{self._clock()}"
                ),
                project_name=candidate.project_name,
                file_name=candidate.file_name,
                version=candidate.version,
                content=candidate.content,
            )
            self._index[record.key] = record
            return record

    def insert_many(self, candidates: Iterable[CandidateFile]) -> List[GeneratedFile]:
        """Insert candidates in order; returns only the newly stored records."""
        stored = []
        for candidate in candidates:
            record = self.insert(candidate)
            if record is not None:
                stored.append(record)
        return stored

    def clear(self) -> None:
        with self._lock:
            count = len(self._index)
            self._index = {}
        logger.info(f"Cleared {count} generated files")

    def get(self, project_name: str, file_name: str, version: str) -> Optional[GeneratedFile]:
        with self._lock:
            return self._index.get((project_name, file_name, version))

    @property
    def records(self) -> List[GeneratedFile]:
        """Snapshot of all records in insertion order."""
        with self._lock:
            return list(self._index.values())

    def grouped(self) -> Dict[str, Dict[str, List[GeneratedFile]]]:
        """
        Group records as project -> file -> versions.

        Projects and files keep first-seen order; versions are sorted
        newest first.
        """
        groups: Dict[str, Dict[str, List[GeneratedFile]]] = {}
        for record in self.records:
            groups.setdefault(record.project_name, {}).setdefault(record.file_name, []).append(record)

        for files in groups.values():
            for versions in files.values():
                versions.sort(key=lambda r: version_sort_key(r.version), reverse=True)
        return groups

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    def __iter__(self) -> Iterator[GeneratedFile]:
        return iter(self.records)
