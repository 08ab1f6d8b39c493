#!/usr/bin/env python
"""
CLI for printing dashboard reports.

Prints the headline counters and the top suburbs by median asking price
for a filter selection, optionally followed by the investment scorecard and
the upcoming inspection schedule.

Usage:
    python -m scopeperth.cli.report
    python -m scopeperth.cli.report --suburb Scarborough --min-beds 4
    python -m scopeperth.cli.report --scorecard --inspections --json
"""

import argparse
import json
import sys
from typing import Any, Dict

from scopeperth.config import get_config
from scopeperth.core.models import FilterState
from scopeperth.exceptions import ScopePerthError
from scopeperth.logging_config import setup_logging, get_logger
from scopeperth.utils.formatting import format_percent, format_price, format_weekly_rent
from scopeperth.utils.suburbs import title_case


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print ScopePerth suburb, scorecard and inspection reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    scopeperth-report
    scopeperth-report --suburb Scarborough --min-beds 4 --max-price 1500000
    scopeperth-report --include-under-offer --top 5 --scorecard
    scopeperth-report --inspections --json
        """,
    )
    parser.add_argument("--suburb", type=str, default="", help="Restrict to one suburb")
    parser.add_argument("--min-beds", type=int, default=3, help="Minimum bedrooms (default: 3)")
    parser.add_argument("--max-price", type=int, default=None, help="Maximum asking price")
    availability = parser.add_mutually_exclusive_group()
    availability.add_argument(
        "--available-only",
        dest="available_only",
        action="store_true",
        default=True,
        help="Exclude under-offer listings (default)",
    )
    availability.add_argument(
        "--include-under-offer",
        dest="available_only",
        action="store_false",
        help="Include under-offer listings",
    )
    parser.add_argument("--top", type=int, default=10, help="Suburbs to show (default: 10)")
    parser.add_argument("--scorecard", action="store_true", help="Include the investment scorecard")
    parser.add_argument("--inspections", action="store_true", help="Include upcoming inspections")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set log level (default: WARNING)",
    )
    return parser


def filters_from_args(args: argparse.Namespace) -> FilterState:
    return FilterState.from_params({
        "suburb": args.suburb,
        "min_bedrooms": args.min_beds,
        "max_price": args.max_price,
        "available_only": args.available_only,
    })


def build_report(
    service,
    filters: FilterState,
    top: int = 10,
    scorecard: bool = False,
    inspections: bool = False,
) -> Dict[str, Any]:
    """Collect the report sections as plain data."""
    report: Dict[str, Any] = {
        "filters": filters.to_dict(),
        "stats": service.headline_stats(filters).to_dict(),
        "top_suburbs": [s.to_dict() for s in service.investor_view(filters, limit=top)["top_suburbs"]],
    }
    if scorecard:
        report["scorecard"] = [row.to_dict() for row in service.scorecard(filters)]
    if inspections:
        report["inspections"] = [
            {
                "label": group.label,
                "listings": [
                    {
                        "id": listing.id,
                        "address": listing.address,
                        "suburb": listing.suburb,
                        "start": listing.inspection_start.isoformat(),
                        "end": listing.inspection_end.isoformat(),
                    }
                    for listing in group.listings
                ],
            }
            for group in service.inspections(filters)
        ]
    return report


def print_report(report: Dict[str, Any]) -> None:
    stats = report["stats"]
    print("\n" + "=" * 60)
    print("ScopePerth Dashboard Report")
    print("=" * 60)
    print(f"\n  Listings:     {stats['total']}")
    print(f"  With pool:    {stats['with_pool']}")
    print(f"  Under offer:  {stats['under_offer']}")
    print(f"  Under budget: {stats['under_budget']} (<= {format_price(stats['budget'])})")

    print("\nTop Suburbs by Median Price:")
    if not report["top_suburbs"]:
        print("  No suburbs with enough priced listings")
    for s in report["top_suburbs"]:
        print(
            f"  {title_case(s['suburb']):<24} {format_price(s['median']):>9} "
            f"avg {format_price(s['average']):>9}  {s['count']:>3} listings  {s['pools']:>2} pools"
        )

    if "scorecard" in report:
        print("\nInvestment Scorecard:")
        if not report["scorecard"]:
            print("  No data")
        for row in report["scorecard"]:
            print(
                f"  {title_case(row['suburb']):<24} yield {format_percent(row['gross_yield'], 2):>7} "
                f"rent {format_weekly_rent(row['weekly_rent']):>7} "
                f"ask vs sold {format_percent(row['ask_vs_sold_pct'], signed=True):>7} "
                f"under offer {format_percent(row['under_offer_rate'], 0):>4}"
            )

    if "inspections" in report:
        print("\nUpcoming Inspections:")
        if not report["inspections"]:
            print("  None scheduled")
        for group in report["inspections"]:
            print(f"  {group['label']}:")
            for listing in group["listings"]:
                print(f"    {listing['start'][:16].replace('T', ' ')}  {listing['address']}, {title_case(listing['suburb'])}")
    print()


def main(argv=None):
    """Main entry point for the report CLI."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level)
    logger = get_logger(__name__)

    if not get_config().supabase.is_configured:
        logger.error("Set SCOPEPERTH_SUPABASE_URL and SCOPEPERTH_SUPABASE_KEY first.")
        sys.exit(1)

    try:
        from scopeperth.dashboard import DashboardService

        filters = filters_from_args(args)
        report = build_report(
            DashboardService(),
            filters,
            top=args.top,
            scorecard=args.scorecard,
            inspections=args.inspections,
        )

        if args.json:
            print(json.dumps(report, indent=2))
        else:
            print_report(report)

    except ScopePerthError as e:
        logger.error("Report failed: %s", e, exc_info=True)
        if args.json:
            print(json.dumps({"error": e.message}))
        else:
            print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
