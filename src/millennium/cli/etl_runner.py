#!/usr/bin/env python3
"""Command line runner for the millennium pipeline.

Subcommands
-----------
- process : run the whole pipeline and write enriched.csv, change_points.csv,
            periods.json, summary.json and qc/enriched_qc.csv
- period  : print one period's records as CSV
- series  : print one indicator as year,value CSV

Exit codes: 0 ok, 1 load failure, 2 usage error / unknown key.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from millennium.domains.config import INDICATORS, PipelineCfg
from millennium.lib.io_guards import DataLoadError, write_csv, write_json
from millennium.lib.progress import Timer
from millennium.pipeline import MillenniumPipeline, records_to_dicts

logger = logging.getLogger("millennium.cli")


def _qc_frame(pipeline: MillenniumPipeline) -> pd.DataFrame:
    rows = []
    for key, seg in pipeline.processed.periods.items():
        stats = seg.stats
        rows.append({
            "period": key,
            "start": seg.period.start,
            "end": seg.period.end,
            "years": stats.years if stats else 0,
            "data_quality": stats.data_quality if stats else None,
            "availability": round(stats.availability, 4) if stats else None,
            "available_indicators": ";".join(stats.available_indicators) if stats else "",
            "change_points": len(seg.change_points),
        })
    return pd.DataFrame(rows)


def _export(pipeline: MillenniumPipeline, out_dir: Path, dry_run: bool) -> None:
    processed = pipeline.processed
    enriched = processed.enriched.copy()
    enriched["change_point"] = [
        cp.description if cp is not None else None for cp in enriched["change_point"]
    ]
    write_csv(enriched, out_dir / "enriched.csv", dry_run=dry_run)
    write_csv(
        pd.DataFrame([cp.to_dict() for cp in processed.change_points]),
        out_dir / "change_points.csv",
        dry_run=dry_run,
    )
    payload = pipeline.to_payload()
    write_json(payload["periods"], out_dir / "periods.json", dry_run=dry_run)
    write_json(payload["summary"], out_dir / "summary.json", dry_run=dry_run)
    write_csv(_qc_frame(pipeline), out_dir / "qc" / "enriched_qc.csv", dry_run=dry_run)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="millennium-etl")
    sub = parser.add_subparsers(dest="cmd")

    p = sub.add_parser("process", help="Run the full pipeline and export results")
    p.add_argument("--csv", default=None, help="Raw millennium CSV (default: MILLENNIUM_CSV or config)")
    p.add_argument("--out", default=None, help="Output directory (default: MILLENNIUM_OUT_DIR or config)")
    p.add_argument("--dry-run", type=int, default=0, help="If 1 do a dry-run (no writes)")

    p_period = sub.add_parser("period", help="Print one period's records as CSV")
    p_period.add_argument("key", help="Period key (medieval, awakening, industrial, crisis, modern)")
    p_period.add_argument("--csv", default=None)
    p_period.add_argument("--indicators", default=None, help="Comma-separated indicator keys")

    p_series = sub.add_parser("series", help="Print one indicator as year,value CSV")
    p_series.add_argument("indicator", help=f"One of: {', '.join(INDICATORS.keys())}")
    p_series.add_argument("--csv", default=None)
    p_series.add_argument("--start", type=int, default=None)
    p_series.add_argument("--end", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    cfg = PipelineCfg.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd is None:
        parser.print_help()
        return 2

    pipeline = MillenniumPipeline(cfg)
    csv_path = Path(args.csv) if args.csv else cfg.csv_path

    try:
        with Timer(f"millennium {args.cmd}"):
            pipeline.load_data(csv_path)
            return _run_command(pipeline, args, cfg)
    except DataLoadError as e:
        logger.error("%s", e)
        return 1


def _run_command(pipeline: MillenniumPipeline, args: argparse.Namespace, cfg: PipelineCfg) -> int:
    if args.cmd == "process":
        out_dir = Path(args.out) if args.out else cfg.out_dir
        _export(pipeline, out_dir, dry_run=bool(args.dry_run))
        return 0

    if args.cmd == "period":
        indicators = args.indicators.split(",") if args.indicators else None
        try:
            data = pipeline.get_data_for_period(args.key, indicators)
        except KeyError as e:
            logger.error("%s", e.args[0])
            return 2
        if data is None:
            logger.error("Unknown period '%s'", args.key)
            return 2
        out = pd.DataFrame(records_to_dicts(data))
        if "change_point" in out.columns:
            out["change_point"] = [cp["description"] if cp else None for cp in out["change_point"]]
        out.to_csv(sys.stdout, index=False)
        return 0

    if args.cmd == "series":
        try:
            series = pipeline.get_time_series_for_indicator(args.indicator, args.start, args.end)
        except KeyError as e:
            logger.error("%s", e.args[0])
            return 2
        pd.DataFrame(series, columns=["year", "value"]).to_csv(sys.stdout, index=False)
        return 0

    logger.error("Unknown command '%s'", args.cmd)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
