"""Reporting utilities for glyphnet."""

from .artifacts import write_manifest
from .glyphs import render_brightness
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["write_manifest", "render_brightness", "CsvSink", "JsonlSink", "PlotAdapter"]
