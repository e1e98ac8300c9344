"""
Precondition checks for HEPEVT records.

Reconstruction trusts its input, so everything that would make it read out
of bounds is checked here first:
- array dimensionality and trailing widths
- matching row counts
- numeric/integer dtypes
- real, finite scaling factors
- parent ranges that point outside the record

Every finding is an error; a record with any issue is not reconstructed.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .hepevt import FIELD_WIDTHS, INTEGER_FIELDS, REAL_FIELDS, HepevtRecord


class HepevtPreconditionError(ValueError):
    """Raised when a record cannot be reconstructed."""

    def __init__(self, report: ValidationReport):
        self.report = report
        super().__init__(str(report))


@dataclass
class ValidationIssue:
    """A single precondition violation found in a record."""

    event_number: int
    row: Optional[int]  # None for record-level issues
    message: str

    def __str__(self) -> str:
        loc = f"event {self.event_number}"
        if self.row is not None:
            loc += f", row {self.row}"
        return f"[ERROR] {loc}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "event_number": self.event_number,
            "row": self.row,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """Summary of all issues found in a record."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def n_errors(self) -> int:
        return len(self.issues)

    @property
    def is_valid(self) -> bool:
        return self.n_errors == 0

    def __str__(self) -> str:
        lines = [f"Record check: {self.n_errors} errors"]
        for issue in self.issues[:50]:  # Cap output
            lines.append(f"  {issue}")
        if len(self.issues) > 50:
            lines.append(f"  ... and {len(self.issues) - 50} more")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "n_errors": self.n_errors,
            "is_valid": self.is_valid,
            "issues": [i.to_dict() for i in self.issues],
        }


def _row_count(record: HepevtRecord) -> int:
    # N is the leading dimension most arrays agree on.
    counts: Counter[int] = Counter()
    for name, width in FIELD_WIDTHS.items():
        arr = getattr(record, name)
        if arr is not None and arr.ndim == (2 if width else 1):
            counts[int(arr.shape[0])] += 1
    return counts.most_common(1)[0][0] if counts else 0


def _check_shapes(record: HepevtRecord, evt: int) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    n = _row_count(record)

    for name, width in FIELD_WIDTHS.items():
        arr = getattr(record, name)
        if arr is None:
            if name != "children":
                issues.append(ValidationIssue(evt, None, f"Missing array: {name}"))
            continue

        shape_txt = f"(N, {width})" if width else "(N,)"
        ndim = 2 if width else 1
        if arr.ndim != ndim:
            issues.append(ValidationIssue(
                evt, None, f"{name} must be a {ndim}-D {shape_txt} array, got {arr.ndim}-D"
            ))
            continue

        expected = (n, width) if width else (n,)
        if arr.shape != expected:
            issues.append(ValidationIssue(
                evt, None,
                f"{name} must have shape {shape_txt} with N={n}, got {arr.shape}"
            ))
            continue

        if name in REAL_FIELDS and arr.dtype.kind not in "fiu":
            issues.append(ValidationIssue(
                evt, None, f"{name} must be numeric, got dtype {arr.dtype}"
            ))
        if name in INTEGER_FIELDS and arr.dtype.kind not in "iu":
            issues.append(ValidationIssue(
                evt, None, f"{name} must be integer, got dtype {arr.dtype}"
            ))

    return issues


def _check_parent_ranges(record: HepevtRecord, evt: int) -> list[ValidationIssue]:
    n = len(record)
    parents = record.parents.astype(np.int64)
    first = parents[:, 0] - 1
    last = parents[:, 1] - 1

    skipped = (first == 0) | (last == 0) | (first > last)
    bad = ~skipped & ((first < 0) | (last >= n))

    issues: list[ValidationIssue] = []
    for row in np.flatnonzero(bad):
        p0, p1 = int(parents[row, 0]), int(parents[row, 1])
        issues.append(ValidationIssue(
            evt, int(row),
            f"Parent range ({p0}, {p1}) normalizes to ({p0 - 1}, {p1 - 1}), "
            f"outside rows 0..{n - 1}"
        ))
    return issues


def check_record(
    record: HepevtRecord,
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
) -> ValidationReport:
    """Collect every precondition violation of ``record``.

    Args:
        record: The record to check.
        momentum_scaling: Factor that will be applied to momenta and masses.
        length_scaling: Factor that will be applied to vertex positions.

    Returns:
        A ValidationReport; ``is_valid`` is True when reconstruction is safe.
    """
    report = ValidationReport()
    evt = record.event_number

    for label, value in (("momentum_scaling", momentum_scaling), ("length_scaling", length_scaling)):
        try:
            finite = math.isfinite(value)
        except TypeError:
            report.issues.append(ValidationIssue(
                evt, None, f"{label} must be a real number, got {value!r}"
            ))
            continue
        if not finite:
            report.issues.append(ValidationIssue(
                evt, None, f"{label} must be finite, got {value!r}"
            ))

    shape_issues = _check_shapes(record, evt)
    report.issues.extend(shape_issues)
    if shape_issues:
        # Parent ranges can only be checked on well-formed arrays.
        return report

    report.issues.extend(_check_parent_ranges(record, evt))
    return report


def require_valid(
    record: HepevtRecord,
    *,
    momentum_scaling: float = 1.0,
    length_scaling: float = 1.0,
) -> None:
    """Raise HepevtPreconditionError if ``record`` fails any check."""
    report = check_record(
        record,
        momentum_scaling=momentum_scaling,
        length_scaling=length_scaling,
    )
    if not report.is_valid:
        raise HepevtPreconditionError(report)
