"""glyphnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.network import Network
from .core.prng import Prng
from .core.types import Topology, TrainingRecord
from .data.records import RecordSet, load_records, one_hot, save_records
from .training.editor import NetworkEditor
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Network",
    "NetworkEditor",
    "Prng",
    "RecordSet",
    "Topology",
    "Trainer",
    "TrainingRecord",
    "activations",
    "types",
    "load_preset",
    "load_records",
    "one_hot",
    "presets",
    "run_pipeline",
    "save_records",
]
