#!/usr/bin/env python3
"""Load a portfolio content export into the chat database.

The export is a JSON object with ``diary``, ``jobs``, ``education``,
``projects`` and ``tools`` arrays (camelCase or snake_case fields).  Every
table is replaced.

Usage examples:
    # Local SQLite file (DATABASE_PATH, default data/portfolio.db)
    uv run python scripts/import_content.py database-export.json

    # Explicit database file
    uv run python scripts/import_content.py export.json --db /tmp/portfolio.db
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
    parser = argparse.ArgumentParser(description="Import portfolio content from a JSON export")
    parser.add_argument("export", type=Path, help="Path to the JSON export file")
    parser.add_argument("--db", type=Path, default=None, help="Local database file override")
    args = parser.parse_args()

    if not args.export.exists():
        print(f"Export file not found: {args.export}", file=sys.stderr)
        sys.exit(1)

    data = json.loads(args.export.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        print("Export must be a JSON object", file=sys.stderr)
        sys.exit(1)

    counts = asyncio.run(ContentStore(db_path=args.db).load_snapshot(data))
    summary = ", ".join(f"{n} {table}" for table, n in counts.items())
    print(f"Imported {summary}")


if __name__ == "__main__":
    main()
