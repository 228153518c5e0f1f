"""Training loops, editor state and pipelines."""

from .editor import NetworkEditor
from .trainer import Trainer

__all__ = ["NetworkEditor", "Trainer"]
