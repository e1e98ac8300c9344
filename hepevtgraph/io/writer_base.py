from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..models import GenEvent


class Writer(ABC):
    @abstractmethod
    def write(self, path: str, events: Iterable[GenEvent], **kwargs) -> int:
        """Write ``events`` to ``path`` and return how many were written."""
        ...
