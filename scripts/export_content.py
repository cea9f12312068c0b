#!/usr/bin/env python3
"""Dump the chat database to a JSON export that import_content.py can load.

Usage examples:
    # Print to stdout
    uv run python scripts/export_content.py

    # Write to a file from an explicit database
    uv run python scripts/export_content.py -o database-export.json --db /tmp/portfolio.db
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from portfolio_chat.content.store import ContentStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Export portfolio content as JSON")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file (stdout if omitted)"
    )
    parser.add_argument("--db", type=Path, default=None, help="Local database file override")
    args = parser.parse_args()

    snapshot = asyncio.run(ContentStore(db_path=args.db).dump_snapshot())
    text = json.dumps(snapshot, indent=2, ensure_ascii=False)

    if args.output is None:
        print(text)
        return

    args.output.write_text(text + "\n", encoding="utf-8")
    summary = ", ".join(f"{len(rows)} {table}" for table, rows in snapshot.items())
    print(f"Exported {summary} to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    main()
