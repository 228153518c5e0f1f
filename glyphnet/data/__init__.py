"""Training record storage for glyphnet."""

from .records import RecordSet, load_records, one_hot, save_records
from .synthetic import make_stroke_records, make_xor_records

__all__ = [
    "RecordSet",
    "load_records",
    "one_hot",
    "save_records",
    "make_stroke_records",
    "make_xor_records",
]
