"""Command line entry point for glyphnet training runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from glyphnet.data.records import load_records
from glyphnet.reporting.glyphs import render_brightness
from glyphnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "steps": result.steps,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if result.history:
        payload["final"] = result.history[-1]
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=sorted(pipelines.presets().keys()),
        default="xor-tiny",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--records", type=Path, help="CSV file of training records")
    parser.add_argument("--epochs", type=int, help="Number of passes over the records")
    parser.add_argument("--rate", type=float, help="Learning rate in (0, 1]")
    parser.add_argument("--seed", type=int, help="Seed for parameter initialisation and shuffling")
    parser.add_argument("--run-dir", help="Directory receiving metrics and manifest")
    parser.add_argument("--enable-plots", action="store_true", help="Write loss.png")
    parser.add_argument(
        "--show-record",
        type=int,
        metavar="INDEX",
        help="Print the glyph of one record from --records and exit",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.show_record is not None:
        if args.records is None:
            raise SystemExit("--show-record requires --records")
        records = load_records(args.records)
        if not -len(records) <= args.show_record < len(records):
            raise SystemExit(
                f"record index {args.show_record} out of range ({len(records)} records)"
            )
        record = records[args.show_record]
        print(render_brightness(record.inputs))
        print(json.dumps(record.outputs.tolist()))
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)
    if args.config:
        config = pipelines.merge_config(config, pipelines.read_config_file(args.config))
    config = json.loads(json.dumps(config))

    train_cfg = config.setdefault("train", {})
    if args.records:
        config["data"] = {"name": "csv", "options": {"path": str(args.records)}}
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.rate is not None:
        train_cfg["rate"] = float(args.rate)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
