"""Test fixtures.

Record fixtures are binary (``.npz``), so rather than shipping them we
(re)generate deterministic ones at test collection time if they are missing.

The standard fixture is a small e+ e- -> Z0 -> mu+ mu- (gamma) record:

    row  pid  status  parents   production vertex
    0     90    11    (1, 1)    none (system line)
    1     11     4    (1, 1)    none (beam)
    2    -11     4    (1, 1)    none (beam)
    3     23    22    (2, 3)    key (1, 2)
    4     13     1    (4, 4)    key (3, 3)
    5    -13     1    (4, 4)    key (3, 3), shared with row 4
    6     22     1    (5, 5)    key (4, 4)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def ee_to_mumu_arrays() -> dict:
    return {
        "momentum": np.array([
            [0.0, 0.0, 0.0, 91.2],
            [0.0, 0.0, 45.6, 45.6],
            [0.0, 0.0, -45.6, 45.6],
            [0.0, 0.0, 0.0, 91.2],
            [10.0, 20.0, 30.0, 37.5],
            [-10.0, -20.0, -25.0, 33.6],
            [0.0, 0.0, -5.0, 5.0],
        ]),
        "mass": np.array([91.2, 0.000511, 0.000511, 91.2, 0.10566, 0.10566, 0.0]),
        "vertex": np.array([
            [0.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
            [0.1, 0.2, 0.3, 0.4],
            [0.1, 0.2, 0.3, 0.4],
            [1.0, 1.0, 1.0, 2.0],
        ]),
        "status": np.array([11, 4, 4, 22, 1, 1, 1]),
        "pid": np.array([90, 11, -11, 23, 13, -13, 22]),
        "parents": np.array([[1, 1], [1, 1], [1, 1], [2, 3], [4, 4], [4, 4], [5, 5]]),
        "children": np.array([[0, 0], [4, 4], [4, 4], [5, 6], [7, 7], [0, 0], [0, 0]]),
    }


def _ensure_standard_fixtures(fixtures: Path) -> None:
    fixtures.mkdir(parents=True, exist_ok=True)

    npz = fixtures / "ee_to_mumu.npz"
    if not npz.exists():
        np.savez(npz, event_number=np.int64(1), **ee_to_mumu_arrays())

    # Parent range pointing past the end of the record.
    bad = fixtures / "out_of_range.npz"
    if not bad.exists():
        arrays = ee_to_mumu_arrays()
        arrays["parents"] = arrays["parents"].copy()
        arrays["parents"][6] = [5, 9]
        np.savez(bad, event_number=np.int64(2), **arrays)


def pytest_configure(config):  # noqa: D401
    """Ensure fixtures exist before any tests run."""
    _ensure_standard_fixtures(FIXTURES)


@pytest.fixture
def ee_arrays() -> dict:
    return ee_to_mumu_arrays()


@pytest.fixture
def ee_record(ee_arrays):
    from hepevtgraph.hepevt import HepevtRecord

    return HepevtRecord.from_arrays(**ee_arrays)


@pytest.fixture
def make_record():
    """Build a record from parent ranges alone, with distinguishable rows."""
    from hepevtgraph.hepevt import HepevtRecord

    def _make(parents, *, vertex=None):
        n = len(parents)
        momentum = np.arange(4 * n, dtype=float).reshape(n, 4)
        if vertex is None:
            vertex = np.arange(4 * n, dtype=float).reshape(n, 4) + 100.0
        return HepevtRecord.from_arrays(
            momentum,
            np.arange(n, dtype=float) + 0.5,
            vertex,
            np.ones(n, dtype=int),
            np.arange(n, dtype=int) + 1,
            np.asarray(parents, dtype=int).reshape(n, 2),
            np.zeros((n, 2), dtype=int),
        )

    return _make
