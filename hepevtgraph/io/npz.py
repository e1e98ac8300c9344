"""NumPy ``.npz`` archives holding a single HEPEVT record."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import numpy as np

from ..hepevt import HepevtRecord
from .reader_base import Reader

REQUIRED_KEYS = ("momentum", "mass", "vertex", "status", "pid", "parents")


def read_npz(path: str) -> HepevtRecord:
    with np.load(Path(path)) as data:
        missing = [k for k in REQUIRED_KEYS if k not in data.files]
        if missing:
            raise ValueError(f"{path}: missing arrays {', '.join(missing)}")
        event_number = int(data["event_number"]) if "event_number" in data.files else 0
        return HepevtRecord.from_arrays(
            data["momentum"],
            data["mass"],
            data["vertex"],
            data["status"],
            data["pid"],
            data["parents"],
            data["children"] if "children" in data.files else None,
            event_number=event_number,
        )


def write_npz(path: str, record: HepevtRecord) -> None:
    arrays = {k: v for k, v in record.arrays().items() if v is not None}
    np.savez(Path(path), event_number=np.int64(record.event_number), **arrays)


class NpzReader(Reader):
    def iter_records(self, path: str) -> Iterator[HepevtRecord]:
        yield read_npz(path)
