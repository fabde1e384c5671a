#!/usr/bin/env python3
"""Command-line interface for the Batch Timeline API.

Usage examples:
    python scripts/cli.py timeline --as-of 2025-06-14
    python scripts/cli.py batch 2025-G11 --as-of 2025-06-14
    python scripts/cli.py death 2025-G11 --qty 2 --date 2025-06-14
    python scripts/cli.py sale 2025-G05 --qty 40 --avg-weight 118.5
    python scripts/cli.py abortion 2025-G13 --qty 1
    python scripts/cli.py override 2025-G09 nursery N3 --affects-following
    python scripts/cli.py base 2025-G11 --farrow-date 2025-05-24 --liveborn 312
    python scripts/cli.py export > backup.json
    python scripts/cli.py import backup.json --mode restore
    python scripts/cli.py config
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0


def format_output(data: object) -> None:
    """Pretty-print a JSON-serialisable object."""
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def handle_response(response: httpx.Response) -> dict:
    """Return the JSON body or exit with an error message."""
    try:
        body = response.json()
    except ValueError:
        body = {"detail": response.text}

    if response.status_code >= 400:
        print(
            f"Error {response.status_code}: {body.get('detail', 'Unknown error')}",
            file=sys.stderr,
        )
        sys.exit(1)

    return body


def _as_of_params(args: argparse.Namespace) -> dict[str, str]:
    return {"as_of": args.as_of} if args.as_of else {}


def cmd_timeline(args: argparse.Namespace, base_url: str) -> None:
    """Print the batch window as a compact table."""
    resp = httpx.get(f"{base_url}/api/timeline", params=_as_of_params(args), timeout=DEFAULT_TIMEOUT)
    body = handle_response(resp)
    if args.json:
        format_output(body)
        return

    print(f"Farm {body['farm_id']} as of {body['as_of']}")
    print(f"{'batch':<10}{'farrow':<12}{'week':>5}  {'stage':<10}{'unit':<12}{'head':>6}{'gilts':>7}  flags")
    for batch in body["batches"]:
        flags = "".join(
            mark
            for mark, on in (
                ("L", batch["is_landed"]),
                ("H", batch["is_half_landed"]),
                ("T", batch["is_theoretical"]),
                ("C", batch["is_closed"]),
            )
            if on
        )
        print(
            f"{batch['batch_id']:<10}{batch['farrow_date']:<12}{batch['week_index']:>5}  "
            f"{batch['stage']:<10}{batch['unit']:<12}{batch['inventory']:>6}{batch['gilt_inventory']:>7}  {flags}"
        )
    print(f"Total head: {body['total_inventory']}  gilts: {body['total_gilt_inventory']}")


def cmd_batch(args: argparse.Namespace, base_url: str) -> None:
    """Show one batch's computed state."""
    resp = httpx.get(
        f"{base_url}/api/timeline/{args.batch_id}",
        params=_as_of_params(args),
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def _put_event(args: argparse.Namespace, base_url: str, data: dict[str, object]) -> None:
    record_date = args.date or date.today().isoformat()
    resp = httpx.put(
        f"{base_url}/api/daily-records/{args.batch_id}/{record_date}",
        json=data,
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_death(args: argparse.Namespace, base_url: str) -> None:
    """Record pig deaths for the day."""
    _put_event(args, base_url, {"pig_death_qty": args.qty})


def cmd_sale(args: argparse.Namespace, base_url: str) -> None:
    """Record pigs sold for the day."""
    data: dict[str, object] = {"pig_sale_qty": args.qty}
    if args.avg_weight is not None:
        data["pig_sale_avg_weight_kg"] = args.avg_weight
    _put_event(args, base_url, data)


def cmd_abortion(args: argparse.Namespace, base_url: str) -> None:
    """Record sow abortions for the day."""
    _put_event(args, base_url, {"sow_abortion_qty": args.qty})


def cmd_override(args: argparse.Namespace, base_url: str) -> None:
    """Assign a housing unit to a batch for a stage."""
    resp = httpx.put(
        f"{base_url}/api/overrides/{args.batch_id}/{args.stage}",
        json={"assigned_unit": args.unit, "affects_following": args.affects_following},
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_base(args: argparse.Namespace, base_url: str) -> None:
    """Create or replace a base record from the given milestones."""
    data = {
        "mate_date": args.mate_date,
        "farrow_date": args.farrow_date,
        "breed_qty": args.breed,
        "liveborn_qty": args.liveborn,
        "wean_qty": args.wean,
        "piglet_in_qty": args.piglet_in,
        "gilt_in_qty": args.gilt_in,
    }
    resp = httpx.put(
        f"{base_url}/api/base-records/{args.batch_id}",
        json={k: v for k, v in data.items() if v is not None},
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_import(args: argparse.Namespace, base_url: str) -> None:
    """Import a JSON backup in merge or restore mode."""
    payload = json.loads(Path(args.file).read_text(encoding="utf-8"))
    resp = httpx.post(
        f"{base_url}/api/transfer/import",
        params={"mode": args.mode},
        json=payload,
        timeout=DEFAULT_TIMEOUT,
    )
    format_output(handle_response(resp))


def cmd_export(args: argparse.Namespace, base_url: str) -> None:
    """Write every record collection as JSON to stdout."""
    resp = httpx.get(f"{base_url}/api/transfer/export", timeout=DEFAULT_TIMEOUT)
    format_output(handle_response(resp))


def cmd_config(args: argparse.Namespace, base_url: str) -> None:
    """Show the farm configuration."""
    resp = httpx.get(f"{base_url}/api/config", timeout=DEFAULT_TIMEOUT)
    format_output(handle_response(resp))


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cli.py",
        description="Batch Timeline CLI",
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"API base URL (default: {DEFAULT_BASE_URL})",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- timeline ---
    p_timeline = sub.add_parser("timeline", help="Show the batch window")
    p_timeline.add_argument("--as-of", help="Reference date YYYY-MM-DD (default: today)")
    p_timeline.add_argument("--json", action="store_true", help="Print raw JSON")

    # --- batch ---
    p_batch = sub.add_parser("batch", help="Show one batch")
    p_batch.add_argument("batch_id", help="Batch ID (YYYY-GNN)")
    p_batch.add_argument("--as-of", help="Reference date YYYY-MM-DD (default: today)")

    # --- daily events ---
    for name, help_text in (
        ("death", "Record pig deaths"),
        ("sale", "Record pigs sold"),
        ("abortion", "Record sow abortions"),
    ):
        p_event = sub.add_parser(name, help=help_text)
        p_event.add_argument("batch_id", help="Batch ID (YYYY-GNN)")
        p_event.add_argument("--qty", type=int, required=True, help="Head count for the day")
        p_event.add_argument("--date", help="Record date YYYY-MM-DD (default: today)")
        if name == "sale":
            p_event.add_argument("--avg-weight", type=float, help="Average sale weight in kg")

    # --- override ---
    p_override = sub.add_parser("override", help="Assign a housing unit")
    p_override.add_argument("batch_id", help="Batch ID (YYYY-GNN)")
    p_override.add_argument("stage", help="Stage (nursery, piglet, grower, finisher, ...)")
    p_override.add_argument("unit", help="Housing unit name")
    p_override.add_argument(
        "--affects-following",
        action="store_true",
        help="Re-anchor the rotation for later batches",
    )

    # --- base ---
    p_base = sub.add_parser("base", help="Create or replace a base record")
    p_base.add_argument("batch_id", help="Batch ID (YYYY-GNN)")
    p_base.add_argument("--mate-date", help="Mating date YYYY-MM-DD")
    p_base.add_argument("--farrow-date", help="Farrowing date YYYY-MM-DD")
    p_base.add_argument("--breed", type=int, help="Sows bred")
    p_base.add_argument("--liveborn", type=int, help="Piglets born alive")
    p_base.add_argument("--wean", type=int, help="Piglets weaned")
    p_base.add_argument("--piglet-in", type=int, help="Head entering the piglet pool")
    p_base.add_argument("--gilt-in", type=int, help="Head diverted to breeding stock")

    # --- import / export ---
    p_import = sub.add_parser("import", help="Import a JSON backup")
    p_import.add_argument("file", help="Path to the JSON file")
    p_import.add_argument("--mode", choices=["merge", "restore"], default="merge")

    sub.add_parser("export", help="Export all records as JSON")

    # --- config ---
    sub.add_parser("config", help="Show the farm configuration")

    return parser


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    base_url: str = args.base_url

    dispatch = {
        "timeline": cmd_timeline,
        "batch": cmd_batch,
        "death": cmd_death,
        "sale": cmd_sale,
        "abortion": cmd_abortion,
        "override": cmd_override,
        "base": cmd_base,
        "import": cmd_import,
        "export": cmd_export,
        "config": cmd_config,
    }

    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    handler(args, base_url)


if __name__ == "__main__":
    main()
