#!/usr/bin/env python3
"""Dump every collection the pydrivesync library can read.

This script signs in, reads the organisation row and each fleet
collection, and prints both the parsed model fields **and** the raw row
JSON so you can spot columns that aren't mapped yet.

Usage
-----
Set environment variables and run::

    export DRIVESYNC_URL="https://fleet.example.gov"
    export DRIVESYNC_ANON_KEY="public-anon-key"
    export DRIVESYNC_EMAIL="admin@example.gov"
    export DRIVESYNC_PASSWORD="your-password"
    python scripts/dump_collections.py

Options::

    --collection NAME    Only dump this collection (repeatable)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --dashboard          Also print the dashboard summary
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydrivesync import COLLECTION_MODELS, DriveSyncClient, DriveSyncConfig, DriveSyncError  # noqa: E402
from pydrivesync.models import DriveSyncModel  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_field(key: str, value: Any, indent: int = 2) -> str:
    prefix = " " * indent
    if hasattr(value, "name") and hasattr(value, "value"):
        return f"{prefix}{key}: {value.name} ({value.value})"
    return f"{prefix}{key}: {value}"


def _print_model(name: str, obj: DriveSyncModel, out: list[str]) -> dict[str, Any]:
    """Pretty-print a row model and return its dict form."""
    out.append(f"\n  ── {name} ──")
    d = obj.model_dump(exclude={"raw"})
    for key, value in d.items():
        out.append(_format_field(key, getattr(obj, key, value)))
    return d


def _print_raw(name: str, raw: dict[str, Any], out: list[str]) -> None:
    """Pretty-print the raw row dict."""
    out.append(f"\n  ── {name} (raw JSON) ──")
    out.append(json.dumps(raw, indent=2, default=str, ensure_ascii=False))


# ── main ─────────────────────────────────────────────────────


async def dump_collection(
    client: DriveSyncClient,
    collection: str,
    *,
    json_mode: bool,
) -> dict[str, Any]:
    """Read and dump every row of a single collection."""
    out: list[str] = [_section(f"COLLECTION  {collection}")]
    data: dict[str, Any] = {"collection": collection, "rows": []}
    model = COLLECTION_MODELS[collection]

    try:
        rows = await client.list_rows(model)
    except DriveSyncError as exc:
        out.append(f"  !! {collection} failed: {exc}")
        data["error"] = str(exc)
        data["traceback"] = traceback.format_exc()
    else:
        out.append(f"  rows      : {len(rows)}")
        for row in rows:
            d = _print_model(f"{model.__name__} id={row.raw.get('id')}", row, out)
            _print_raw(model.__name__, row.raw, out)
            data["rows"].append({"parsed": d, "raw": row.raw})

    if not json_mode:
        print("\n".join(out))

    return data


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all collections pydrivesync can read for debugging / development.",
    )
    parser.add_argument(
        "--collection",
        action="append",
        choices=sorted(COLLECTION_MODELS),
        help="Only dump this collection (default: all)",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--dashboard", action="store_true", help="Also compute the dashboard summary")
    parser.add_argument("--email", default=os.environ.get("DRIVESYNC_EMAIL"), help="Sign-in email")
    parser.add_argument("--password", default=os.environ.get("DRIVESYNC_PASSWORD"), help="Sign-in password")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    if not args.email or not args.password:
        parser.error("Set DRIVESYNC_EMAIL and DRIVESYNC_PASSWORD (or pass --email/--password)")

    config = DriveSyncConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "base_url": config.base_url,
        "collections": [],
    }

    out: list[str] = []
    out.append(_section("pydrivesync dump_collections"))
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  base_url  : {config.base_url}")

    async with DriveSyncClient(config) as client:
        await client.resolve_session()
        snapshot = await client.sign_in(args.email, args.password)
        out.append(f"  user_id   : {snapshot.user_id}")
        out.append(f"  role      : {snapshot.role or '-'}")
        result["user_id"] = snapshot.user_id

        tenant = await client.get_tenant()
        if tenant is not None:
            out.append(f"  tenant    : {tenant.organization_name} ({tenant.location or '-'})")
            result["tenant"] = tenant.raw

        if not args.json_mode:
            print("\n".join(out))

        for collection in args.collection or list(COLLECTION_MODELS):
            result["collections"].append(await dump_collection(client, collection, json_mode=args.json_mode))

        if args.dashboard:
            summary = await client.get_dashboard_summary()
            result["dashboard"] = summary.model_dump()
            if not args.json_mode:
                dash_out = [_section("DASHBOARD")]
                dash_out.extend(_format_field(key, value) for key, value in result["dashboard"].items())
                print("\n".join(dash_out))

        await client.sign_out()

    # ── Output ──
    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.json_mode and not args.output:
        print(payload)
    elif args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    asyncio.run(main())
