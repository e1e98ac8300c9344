from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from ..hepevt import HepevtRecord
from .reader_base import Reader


def _require_pyarrow():
    try:
        import pyarrow as pa  # type: ignore
        import pyarrow.parquet as pq  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("Parquet support requires 'pyarrow'. Install hepevtgraph[parquet].") from e
    return pa, pq


# One event per table row; every column holds a list with one entry per particle.
MOMENTUM_COLUMNS = ("px", "py", "pz", "e")
VERTEX_COLUMNS = ("vx", "vy", "vz", "vt")
PARENT_COLUMNS = ("parent_first", "parent_last")
CHILD_COLUMNS = ("child_first", "child_last")
REQUIRED_COLUMNS = MOMENTUM_COLUMNS + ("m",) + VERTEX_COLUMNS + ("status", "pid") + PARENT_COLUMNS


def _stack(row: dict, names: tuple[str, ...], dtype) -> np.ndarray:
    cols = [np.asarray(row[name] or [], dtype=dtype) for name in names]
    lengths = {len(c) for c in cols}
    if len(lengths) > 1:
        raise ValueError(f"Columns {', '.join(names)} have different lengths: {sorted(lengths)}")
    return np.stack(cols, axis=1) if cols[0].size else np.zeros((0, len(names)), dtype=dtype)


def _record_from_row(row: dict, index: int) -> HepevtRecord:
    children = None
    if all(row.get(c) is not None for c in CHILD_COLUMNS):
        children = _stack(row, CHILD_COLUMNS, np.int64)
    return HepevtRecord.from_arrays(
        _stack(row, MOMENTUM_COLUMNS, np.float64),
        np.asarray(row["m"] or [], dtype=np.float64),
        _stack(row, VERTEX_COLUMNS, np.float64),
        np.asarray(row["status"] or [], dtype=np.int64),
        np.asarray(row["pid"] or [], dtype=np.int64),
        _stack(row, PARENT_COLUMNS, np.int64),
        children,
        event_number=index if row.get("event_number") is None else int(row["event_number"]),
    )


def iter_parquet_records(path: str) -> Iterator[HepevtRecord]:
    _pa, pq = _require_pyarrow()
    table = pq.read_table(path)
    missing = [c for c in REQUIRED_COLUMNS if c not in table.column_names]
    if missing:
        raise ValueError(f"{path}: missing columns {', '.join(missing)}")
    for i, row in enumerate(table.to_pylist(), start=1):
        yield _record_from_row(row, i)


def write_parquet_records(path: str, records: Iterable[HepevtRecord]) -> int:
    pa, pq = _require_pyarrow()
    rows = []
    for rec in records:
        row = {"event_number": rec.event_number}
        for j, name in enumerate(MOMENTUM_COLUMNS):
            row[name] = rec.momentum[:, j].tolist()
        row["m"] = rec.mass.tolist()
        for j, name in enumerate(VERTEX_COLUMNS):
            row[name] = rec.vertex[:, j].tolist()
        row["status"] = rec.status.tolist()
        row["pid"] = rec.pid.tolist()
        for j, name in enumerate(PARENT_COLUMNS):
            row[name] = rec.parents[:, j].tolist()
        for j, name in enumerate(CHILD_COLUMNS):
            row[name] = rec.children[:, j].tolist() if rec.children is not None else None
        rows.append(row)
    table = pa.Table.from_pylist(rows)
    pq.write_table(table, path)
    return len(rows)


class ParquetReader(Reader):
    def iter_records(self, path: str) -> Iterator[HepevtRecord]:
        return iter_parquet_records(path)
