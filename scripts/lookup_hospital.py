#!/usr/bin/env python3
"""
Look up hospital codes against the configured spreadsheet from the shell.

Prints how each code was matched (header column or neighbor cell).

Usage:
    python scripts/lookup_hospital.py H00001
    python scripts/lookup_hospital.py H00001 H00002 --range "Sheet1!A:C"
    python scripts/lookup_hospital.py --dump       # Print the raw rows
"""
import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Paths
SCRIPT_DIR = Path(__file__).parent
PROJECT_DIR = SCRIPT_DIR.parent

load_dotenv(PROJECT_DIR / ".env")
sys.path.insert(0, str(PROJECT_DIR / "backend"))

from services.credentials import CredentialsError  # noqa: E402
from services.hospital_lookup import find_hospital  # noqa: E402
from services.sheets import SheetsAPIError, read_hospital_range  # noqa: E402


async def run(codes: list[str], range_: str | None, dump: bool) -> int:
    data = await read_hospital_range(range_)
    rows = data.get("values", [])
    print(f"Read {len(rows)} rows from {data.get('range')}")

    if dump:
        for i, row in enumerate(rows):
            print(f"{i:>5}: {json.dumps(row, ensure_ascii=False)}")

    missing = 0
    for code in codes:
        result = find_hospital(rows, code)
        if result is None:
            print(f"❌ {code}: not found")
            missing += 1
        else:
            print(f"✅ {code}: {result.record.name} ({result.method}, row {result.row_index})")
    return 1 if missing else 0


def main():
    parser = argparse.ArgumentParser(description="Look up hospital codes in the spreadsheet")
    parser.add_argument("codes", nargs="*", help="Hospital codes (e.g., H00001)")
    parser.add_argument("--range", dest="range_", help="A1 range (defaults to HOSPITAL_RANGE)")
    parser.add_argument("--dump", action="store_true", help="Print every row that was read")
    args = parser.parse_args()

    if not args.codes and not args.dump:
        parser.error("give at least one code or --dump")

    if not os.getenv("SPREADSHEET_ID") and os.getenv("USE_MOCK_DATA", "").lower() not in ("1", "true"):
        print("Error: SPREADSHEET_ID not set")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(args.codes, args.range_, args.dump)))
    except (SheetsAPIError, CredentialsError) as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
