"""Command-line entry point."""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Optional, Sequence

from closet_rental.config import AppConfig, load_engine_settings
from closet_rental.domain.models import RevenueGranularity
from closet_rental.logging_config import configure_logging, get_logger
from closet_rental.paths import get_config_path
from closet_rental.store import RentalStore
from closet_rental.utils.formatting import format_currency, format_date


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="closet_rental",
        description="Print the clothing rental dashboard.",
    )
    parser.add_argument(
        "--database",
        help="SQLite file to use instead of the configured database.",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Load demo items, customers and rentals before reporting.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject check-outs that exceed available stock.",
    )
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or WARNING.")
    parser.add_argument(
        "--granularity",
        choices=[choice.value for choice in RevenueGranularity],
        default=RevenueGranularity.MONTH.value,
        help="Revenue bucket size.",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only.",
    )
    return parser.parse_args(argv)


def _print_dashboard(store: RentalStore, granularity: RevenueGranularity) -> None:
    currency = store.settings.currency
    summary = store.dashboard_summary()
    print(f"Item kinds:       {summary.item_kinds}")
    print(f"Units in stock:   {summary.total_stock}")
    print(f"Active rentals:   {summary.active_rentals}")
    print(f"Overdue rentals:  {summary.overdue_rentals}")

    print("\nMost rented right now")
    for entry in store.popular_items():
        print(f"  {entry.item.name} ({entry.item.size}): {entry.rented} out")

    print("\nTop customers this year")
    for spender in store.top_spenders():
        print(f"  {spender.name}: {format_currency(spender.total_spent, currency)}")

    print("\nOverdue")
    for rental in store.overdue_rentals():
        customer = store.get_customer(rental.customer_id)
        name = customer.name if customer else f"#{rental.customer_id}"
        print(f"  #{rental.id} {name}, due {format_date(rental.due_date)}")

    print(f"\nRevenue by {granularity.value}")
    for bucket in store.revenue_by_bucket(granularity):
        print(f"  {bucket.label:>9}: {format_currency(bucket.total, currency)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build a store from settings and print its dashboard."""
    args = _parse_args(argv)
    settings = load_engine_settings(get_config_path())
    if args.database:
        settings = replace(settings, database=args.database)
    if args.strict:
        settings = replace(settings, enforce_availability=True)
    configure_logging(args.log_level or settings.log_level, log_to_file=not args.no_log_file)

    config = AppConfig()
    logger = get_logger(__name__)
    logger.info("Starting %s", config.app_name)

    with RentalStore.init(settings, seed=args.seed) as store:
        _print_dashboard(store, RevenueGranularity(args.granularity))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
