from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from ..hepevt import HepevtRecord


class Reader(ABC):
    @abstractmethod
    def iter_records(self, path: str) -> Iterator[HepevtRecord]:
        ...

    def read(self, path: str) -> list[HepevtRecord]:
        """Default loads everything via iter_records()."""
        return list(self.iter_records(path))
