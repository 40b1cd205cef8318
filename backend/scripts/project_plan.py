#!/usr/bin/env python3
"""Project a plan file — day-by-day net worth to CSV.

Reads a persisted plan (and optionally an event schema) as JSON, runs the
simulation engine over the requested day range, and writes the snapshot
series as CSV. Proposed parameter updates are written alongside as JSON.

Usage:
    cd backend && python scripts/project_plan.py plan.json --start 10000 --end 30000
    cd backend && python scripts/project_plan.py plan.json --schema schema.json --interval 30
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BACKEND_DIR = Path(__file__).resolve().parent.parent
PROJECT_DIR = BACKEND_DIR.parent
REPORTS_DIR = PROJECT_DIR / "reports"

sys.path.insert(0, str(BACKEND_DIR))

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)

from lever.models.plan import Plan, Schema
from lever.services.export import write_csv
from lever.services.simulation_service import simulate_plan


def _load_json(path: Path) -> dict:
    if not path.is_file():
        raise FileNotFoundError(f"{path} not found")
    return json.loads(path.read_text())


def main():
    parser = argparse.ArgumentParser(description="Project a financial plan day by day")
    parser.add_argument("plan", type=Path, help="Plan JSON file")
    parser.add_argument("--schema", type=Path, default=None, help="Event schema JSON file")
    parser.add_argument("--start", type=int, default=0, help="First day offset (inclusive)")
    parser.add_argument("--end", type=int, default=365 * 30, help="Last day offset (inclusive)")
    parser.add_argument("--interval", type=int, default=1, help="Snapshot every N days")
    parser.add_argument("--out", type=Path, default=REPORTS_DIR / "projection.csv")
    args = parser.parse_args()

    try:
        plan = Plan.model_validate(_load_json(args.plan))
        schema = Schema.model_validate(_load_json(args.schema)) if args.schema else None
    except (OSError, json.JSONDecodeError, ValueError) as e:
        logger.error("Cannot load input: %s", e)
        sys.exit(1)

    result = simulate_plan(plan, schema, args.start, args.end, snapshot_interval=args.interval)

    out_path = write_csv(result.datums, args.out)
    logger.info("Wrote %d snapshots to %s", len(result.datums), out_path)

    if result.parameter_updates:
        updates_path = out_path.with_name(out_path.stem + "_updates.json")
        updates_path.write_text(json.dumps([u.model_dump() for u in result.parameter_updates], indent=2))
        logger.info("Wrote %d parameter updates to %s", len(result.parameter_updates), updates_path)

    if result.datums:
        last = result.datums[-1]
        logger.info("Net worth on day %d: %.2f", last.date, last.value)
    for warning in result.warnings[:10]:
        logger.info("Negative balance: %s on day %d (%.2f)", warning.envelope_name, warning.date, warning.balance)


if __name__ == "__main__":
    main()
