"""Pipeline assembly: presets, config overrides and single training runs."""

from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping, Tuple

from ..core.network import Network
from ..core.types import RunResult
from ..data.records import RecordSet, load_records
from ..data.synthetic import make_stroke_records, make_xor_records
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .trainer import Trainer

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "digits-16x16": {
        "data": {
            "name": "strokes",
            "options": {"width": 16, "height": 16, "classes": 10, "per_class": 4, "seed": 0},
        },
        "model": {"inputs": 256, "layers": [20, 10]},
        "train": {
            "epochs": 20,
            "seed": 1337,
            "rate": 0.1,
            "shuffle": True,
            "run_dir": "runs/digits-16x16",
            "enable_plots": False,
        },
    },
    "xor-tiny": {
        "data": {"name": "xor", "options": {}},
        "model": {"inputs": 2, "layers": [4, 1]},
        "train": {
            "epochs": 200,
            "seed": 7,
            "rate": 0.5,
            "shuffle": True,
            "run_dir": "runs/xor-tiny",
            "enable_plots": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(_PRESETS[name])  # type: ignore[return-value]
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config override."""

    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _resolve_run_dir(run_dir: str | Path) -> Path:
    path = Path(run_dir)
    root = os.environ.get("GLYPHNET_RUN_ROOT")
    if root and not path.is_absolute():
        return Path(root) / path
    return path


def _load_records(data_cfg: Mapping[str, object], network: Network) -> Tuple[RecordSet, dict]:
    name = str(data_cfg.get("name", "xor"))
    options = dict(data_cfg.get("options", {}) or {})
    if name == "xor":
        records = make_xor_records()
    elif name == "strokes":
        records = make_stroke_records(**options)
    elif name == "csv":
        path = options.get("path")
        if not path:
            raise ValueError("csv records require data.options.path")
        records = load_records(path, network.input_count, network.output_count)
    else:
        raise ValueError(f"Unsupported record source: {name}")

    if not records.fits(network.input_count, network.output_count):
        raise ValueError(
            f"records {name!r} are {records.input_count}->{records.output_count}, "
            f"model is {network.input_count}->{network.output_count}"
        )
    provenance = {"name": name, "options": options, "count": len(records)}
    return records, provenance


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Build, seed and train a network as described by ``config``."""

    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]
    data_cfg = dict(config.get("data", {}))  # type: ignore[arg-type]

    network = Network(int(model_cfg["inputs"]), [int(size) for size in model_cfg["layers"]])
    seed = int(train_cfg.get("seed", 0))
    network.randomize(seed)

    records, provenance = _load_records(data_cfg, network)
    run_dir = _resolve_run_dir(train_cfg.get("run_dir", "runs/default"))
    run_dir.mkdir(parents=True, exist_ok=True)
    metrics_path = run_dir / "metrics.jsonl"
    logger.info(
        "Training %r on %d %s records for %s epochs in %s",
        network,
        len(records),
        provenance["name"],
        train_cfg.get("epochs", 1),
        run_dir,
    )

    callbacks = [
        JsonlSink(metrics_path, split="train", seed=seed),
        CsvSink(run_dir / "metrics.csv", split="train"),
        PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False))),
    ]
    trainer = Trainer(network, rate=float(train_cfg.get("rate", 0.1)), callbacks=callbacks)
    result = trainer.run(
        records,
        epochs=int(train_cfg.get("epochs", 1)),
        seed=seed,
        shuffle=bool(train_cfg.get("shuffle", True)),
    )

    manifest_path = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        records=provenance,
        seed=seed,
    )
    if result.history:
        logger.info("Final epoch metrics: %s", result.history[-1])
    return RunResult(
        epochs=result.epochs,
        steps=result.steps,
        metrics_path=str(metrics_path),
        manifest_path=manifest_path,
        history=result.history,
    )


__all__ = ["load_preset", "merge_config", "presets", "read_config_file", "run_pipeline"]
