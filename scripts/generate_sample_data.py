"""
Sample Data Script

Replaces the configured store's contents with a generated month of stall
activity and prints a short summary.
"""

import argparse

from stallbook.config.logging import configure_logging
from stallbook.formatting import format_currency, format_percent
from stallbook.services import LedgerService
from stallbook.storage import create_kv_store, create_record_store


def main():
    parser = argparse.ArgumentParser(description="Generate demo data for Stallbook")
    parser.add_argument("--days", type=int, default=30, help="Days of history to generate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    configure_logging()

    ledger = LedgerService(create_record_store(create_kv_store()))
    created = ledger.generate_sample_data(seed=args.seed, days=args.days)
    metrics = ledger.metrics()

    print(f"Generated {created} daily records")
    print(f"  Revenue: {format_currency(metrics.total_revenue)}")
    print(f"  Profit:  {format_currency(metrics.total_profit)}")
    print(f"  Margin:  {format_percent(metrics.avg_profit_margin)}")


if __name__ == "__main__":
    main()
