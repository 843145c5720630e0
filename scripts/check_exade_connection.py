#!/usr/bin/env python3
"""
Check connectivity to the Exade tariff web service.
Reads EXADE_* variables (see tarificateur/settings.py), sends a probe simulation
to the pricing endpoint and prints the products returned.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tarificateur.integrations.policy.errors import TarificationError
from tarificateur.integrations.policy.tariff_service import PROBE_REQUEST, TariffService
from tarificateur.settings import ConfigurationError, load_settings


async def run(show_quotes: bool) -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(f"Exade settings: {settings.redacted()}")
    service = TariffService(settings)
    try:
        if not show_quotes:
            await service.check_connection()
            print("Exade connection OK")
            return 0
        quotes = await service.fetch_quotes(PROBE_REQUEST)
    except TarificationError as e:
        print(f"Exade call failed: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    for quote in quotes:
        print(f"{quote.product_id:>4}  {quote.insurer:<20} {quote.product_name:<30} {quote.monthly_cost:>8.2f} EUR/month")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Check the Exade tariff web service")
    parser.add_argument("--quotes", action="store_true", help="Print the quotes returned for the probe profile")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(run(args.quotes))


if __name__ == "__main__":
    sys.exit(main())
