"""copycatcher unified command-line interface.

Usage
-----
$ copycatcher scan submissions/ Main.java Util.java --seed 7
$ copycatcher run config.yml

The *scan* command enumerates every file under a directory, groups the
submissions of each requested filename, and writes one
``<name> Clusters.txt`` report per filename.

The *run* command does the same from a YAML configuration file::

    data_dir: submissions/
    files: [Main.java]
    detector:
      permutation_count: 2500
      std_factor: 2.0
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml  # type: ignore

from .detector.clusters import ClusterResult
from .detector.config import DetectorConfig
from .detector.errors import DetectorError, InvalidParameterError
from .detector.pipeline import run_detection

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _configure_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_summary(results: Dict[str, Optional[ClusterResult]]) -> None:
    for filename, result in results.items():
        if result is None:
            print(f"{filename}: not enough submissions to cluster")
            continue
        print(
            f"{filename}: {result.flagged_count} of {result.document_count} submissions flagged "
            f"(mean max {result.mean:.3f}, stddev {result.stddev:.3f}, cutoff {result.threshold:.3f})"
        )


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_scan(args: argparse.Namespace) -> None:
    base = DetectorConfig.from_yaml(args.config) if args.config else DetectorConfig()
    config = base.with_overrides(
        permutation_count=args.permutations,
        shingle_width=args.ngram,
        std_factor=args.std_factor,
        seed=args.seed,
        workers=args.workers,
        file_glob=args.glob,
        out_dir=str(args.out) if args.out else None,
        json_report=True if args.json else None,
        show_progress=False if args.quiet else None,
    )
    results = run_detection(args.directory, args.files, config)
    _print_summary(results)


def _cmd_run(args: argparse.Namespace) -> None:
    cfg_path: Path = args.config.resolve()
    with cfg_path.open() as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise InvalidParameterError(f"{cfg_path}: expected a mapping at top level")

    for key in ("data_dir", "files"):
        if key not in cfg:
            raise InvalidParameterError(f"{cfg_path}: missing required key '{key}'")

    data_dir = Path(cfg["data_dir"]).expanduser().resolve()
    files = cfg["files"]
    if isinstance(files, str):
        files = [files]

    config = DetectorConfig.from_dict(cfg.get("detector") or {})
    if args.quiet:
        config = config.with_overrides(show_progress=False)
    results = run_detection(data_dir, files, config)
    _print_summary(results)


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copycatcher",
        description="Flag submissions with statistically unusual MinHash similarity",
    )
    sub = parser.add_subparsers(required=True, dest="cmd")

    # options shared by every command, accepted after the command name
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")

    # scan
    p_scan = sub.add_parser("scan", parents=[common], help="Cluster submissions found under a directory")
    p_scan.add_argument("directory", type=Path, help="Directory holding one folder per submitter")
    p_scan.add_argument("files", nargs="+", help="Submission filenames to compare (e.g. Main.java)")
    p_scan.add_argument("--config", type=Path, help="YAML file with a 'detector' section")
    p_scan.add_argument("--permutations", type=int, help="Signature length (default: 2500)")
    p_scan.add_argument("--ngram", type=int, help="Words per shingle (default: 3)")
    p_scan.add_argument("--std-factor", type=float,
                        help="Standard deviations above the mean that count as suspicious (default: 2.0)")
    p_scan.add_argument("--seed", type=int, help="Seed for reproducible hash functions")
    p_scan.add_argument("--workers", type=int, help="Threads for the pairwise passes (default: 1)")
    p_scan.add_argument("--glob", help="Glob restricting enumerated files (default: *.java)")
    p_scan.add_argument("-o", "--out", type=Path, help="Report directory (default: .)")
    p_scan.add_argument("--json", action="store_true", help="Also write a JSON report")
    p_scan.set_defaults(func=_cmd_scan)

    # run
    p_run = sub.add_parser("run", parents=[common], help="Run detection via YAML config")
    p_run.add_argument("config", type=Path, help="Path to YAML configuration file")
    p_run.set_defaults(func=_cmd_run)

    return parser


def main(argv: List[str] | None = None) -> int:  # noqa: D401 – simple
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.quiet)
    try:
        args.func(args)
    except (DetectorError, FileNotFoundError, yaml.YAMLError) as exc:
        print(f"copycatcher: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
