"""Command line entry point: reconcile single legs, look up baggage, or process offer files.

Usage patterns:

1. One leg from raw provider fields:
   tripfare reconcile --departure 2025-03-01T22:00:00Z --arrival 2025-03-01T20:00:00Z --duration PT8H00M

2. Baggage entitlement of a fare:
   tripfare baggage Emirates --fare-tier basic --cabin-class BUSINESS

3. Whole offers file to JSON (and optionally HTML) reports:
   tripfare batch offers.json --output itineraries.json --html itineraries.html
"""
import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from tripfare.baggage.policies import DEFAULT_TABLES, PolicyTables, load_policy_tables
from tripfare.baggage.resolver import format_baggage_info, is_low_cost_carrier, resolve_allowance
from tripfare.config import settings
from tripfare.logging_config import setup_logging
from tripfare.processing.offers import OfferProcessor
from tripfare.processing.reconcile import reconcile


def _load_tables(policy_file: Path | None) -> PolicyTables:
    if policy_file is None:
        return DEFAULT_TABLES
    return load_policy_tables(policy_file)


def _dump(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_batch(
        offers_file: Path,
        output_json: Path,
        output_html: Path | None = None,
        policy_file: Path | None = None,
) -> Path:
    processor = OfferProcessor(_load_tables(policy_file))
    offers = processor.load_offers(offers_file)

    logging.info(f"Processing {len(offers)} offers from {offers_file}")
    reports = processor.process_offers(offers)
    output_json.write_text(
        json.dumps([r.as_payload() for r in reports], indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logging.info(f"Output written to {output_json}")

    if output_html:
        output_html.write_text(processor.render_html(reports), encoding="utf-8")
        logging.info(f"HTML report written to {output_html}")

    return output_json


def _cmd_reconcile(args: argparse.Namespace) -> int:
    times = reconcile(args.departure, args.arrival, args.duration, args.date)
    _dump(times.as_payload())
    return 0


def _cmd_baggage(args: argparse.Namespace) -> int:
    tables = _load_tables(args.policies)
    allowance = resolve_allowance(args.airline, args.fare_tier, args.cabin_class, tables)
    summary = format_baggage_info(allowance)
    _dump({
        'airline': args.airline,
        'allowance': allowance.as_payload(),
        'cabin': summary.cabin_text,
        'checked': summary.checked_text,
        'personalItem': summary.personal_item_text,
        'lowCostCarrier': is_low_cost_carrier(args.airline, tables),
    })
    return 0


def _cmd_batch(args: argparse.Namespace) -> int:
    run_batch(args.offers, args.output, args.html, args.policies)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Flight itinerary reconciliation and baggage entitlements")
    p.add_argument("--log-level", default=settings.log_level)
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("reconcile", help="Reconcile the times of a single flight leg")
    r.add_argument("--departure", help="Departure ISO datetime")
    r.add_argument("--arrival", help="Arrival ISO datetime")
    r.add_argument("--duration", help="Provider duration (PT2H30M or 2h 30m)")
    r.add_argument("--date", default="", help="Fallback departure date YYYY-MM-DD")
    r.set_defaults(func=_cmd_reconcile)

    b = sub.add_parser("baggage", help="Resolve the baggage allowance of a fare")
    b.add_argument("airline")
    b.add_argument("--fare-tier", default="basic", help="basic | benefits")
    b.add_argument("--cabin-class", default="ECONOMY", help="ECONOMY | PREMIUM_ECONOMY | BUSINESS | FIRST")
    b.add_argument("--policies", type=Path, default=settings.policy_file, help="JSON baggage policy file")
    b.set_defaults(func=_cmd_baggage)

    batch = sub.add_parser("batch", help="Process a JSON file of raw flight offers")
    batch.add_argument("offers", type=Path, help="JSON list of offers")
    batch.add_argument("--output", type=Path, default=settings.output_json, help="JSON report path")
    batch.add_argument("--html", type=Path, default=settings.output_html, help="Optional HTML report path")
    batch.add_argument("--policies", type=Path, default=settings.policy_file, help="JSON baggage policy file")
    batch.set_defaults(func=_cmd_batch)
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        return args.func(args)
    except Exception:  # noqa: BLE001
        logging.exception(f"Command '{args.command}' failed")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
