"""hepevtgraph: rebuild linked event graphs from flat HEPEVT particle records."""

from __future__ import annotations

__version__ = "0.1.0"

from .convert import check, convert, info, read, reconstruct, write
from .hepevt import HepevtRecord, parent_key
from .models import FourVector, GenEvent, GenParticle, GenVertex
from .reconstruct import fill_genevent_from_hepevt, fill_genevent_from_record, genevent_from_record
from .validation import HepevtPreconditionError, ValidationReport, check_record

__all__ = [
    "__version__",
    "check",
    "convert",
    "info",
    "read",
    "reconstruct",
    "write",
    "HepevtRecord",
    "parent_key",
    "FourVector",
    "GenEvent",
    "GenParticle",
    "GenVertex",
    "fill_genevent_from_hepevt",
    "fill_genevent_from_record",
    "genevent_from_record",
    "HepevtPreconditionError",
    "ValidationReport",
    "check_record",
]
