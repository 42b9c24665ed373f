#!/usr/bin/env python3
"""
Summarise how ready a crawled Wild Apricot site is for migration and
export the counters as (key, count) CSV files to the "data/" folder.

Usage:
  python scripts/analyze_crawl_report.py \\
    --input reports/crawl/crawl-report.json \\
    --output-dir data/readiness

If the arguments are not given, the defaults above are used.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wa_migration.utils.readiness import summarize_crawl_report, write_counts_csv

# summary key -> (csv file name, header of the key column)
TABLES = {
    "blockTypes": ("block_types.csv", "block_type"),
    "warningTypes": ("warning_types.csv", "warning_type"),
    "widgetTypes": ("widget_types.csv", "gadget"),
    "scriptPurposes": ("script_purposes.csv", "purpose"),
    "unhandled": ("unhandled_categories.csv", "category"),
    "externalDomains": ("external_domains.csv", "domain"),
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Summarise migration readiness of a crawl report."
    )
    parser.add_argument(
        "--input",
        default="reports/crawl/crawl-report.json",
        help="Path to the crawl report JSON",
    )
    parser.add_argument(
        "--output-dir",
        default="data/readiness",
        help="Folder for the (key,count) CSV files",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    in_path = Path(args.input)
    out_dir = Path(args.output_dir)

    if not in_path.exists():
        raise SystemExit(f"Crawl report not found: {in_path}")

    with in_path.open("r", encoding="utf-8") as f:
        summary = summarize_crawl_report(json.load(f))

    for key, (file_name, header) in TABLES.items():
        write_counts_csv(summary[key], out_dir / file_name, key_header=header)

    actions = summary["actions"]
    print(f"Pages: {summary['pages']}")
    print(f"Blocks: {summary['totalBlocks']}")
    print(
        f"Auto: {actions['auto']}  Remove: {actions['remove']}  "
        f"Manual: {actions['manual']}  Unknown: {actions['unknown']}"
    )
    print("Top issues:")
    for issue, count in summary["topIssues"]:
        print(f"  {issue}: {count}")
    print(f"CSV files written to: {out_dir}")


if __name__ == "__main__":
    main()
