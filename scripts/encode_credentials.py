#!/usr/bin/env python3
"""
Encode a service account JSON key for the GOOGLE_CREDENTIALS_BASE64 env var.

Hosts like Render can't mount files, so the key is passed base64 encoded.

Usage:
    python scripts/encode_credentials.py service-account.json
    python scripts/encode_credentials.py service-account.json --env >> .env
"""
import argparse
import base64
import json
import sys
from pathlib import Path

REQUIRED_KEYS = ("type", "client_email", "private_key", "token_uri")


def main():
    parser = argparse.ArgumentParser(description="Base64 encode a Google service account key")
    parser.add_argument("key_file", type=Path, help="Path to the service account JSON")
    parser.add_argument("--env", action="store_true", help="Print as GOOGLE_CREDENTIALS_BASE64=...")
    args = parser.parse_args()

    try:
        info = json.loads(args.key_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error: cannot read {args.key_file}: {e}", file=sys.stderr)
        sys.exit(1)

    missing = [k for k in REQUIRED_KEYS if k not in info]
    if missing or info.get("type") != "service_account":
        print(f"Error: not a service account key (missing: {', '.join(missing) or 'type'})", file=sys.stderr)
        sys.exit(1)

    encoded = base64.b64encode(json.dumps(info).encode("utf-8")).decode("ascii")
    print(f"GOOGLE_CREDENTIALS_BASE64={encoded}" if args.env else encoded)
    print(f"Encoded key for {info['client_email']}", file=sys.stderr)


if __name__ == "__main__":
    main()
