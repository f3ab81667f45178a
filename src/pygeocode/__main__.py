"""Command line entry point: ``python -m pygeocode ADDRESS [ADDRESS ...]``."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pygeocode._redact import redact_for_log
from pygeocode.client import GeocodeClient
from pygeocode.config import GeocoderConfig
from pygeocode.exceptions import GeocodeError, PersistenceError

_logger = logging.getLogger("pygeocode")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pygeocode",
        description="Geocode addresses while honouring request pacing and the daily quota.",
    )
    parser.add_argument("addresses", nargs="+", metavar="ADDRESS", help="Address to geocode")
    parser.add_argument("--state-file", default=None, help="Path of the persisted rate/quota state")
    parser.add_argument("--api-key", default=None, help="API key (replaces the stored one)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _geocode_all(config: GeocoderConfig, addresses: Sequence[str]) -> tuple[list[Any], int]:
    results: list[Any] = []
    failures = 0
    async with GeocodeClient(config) as client:
        for address in addresses:
            try:
                response = await client.get_results(address)
            except PersistenceError:
                raise
            except GeocodeError as exc:
                failures += 1
                print(f"{address}: {exc}", file=sys.stderr)
                results.append(None)
                continue
            results.append(response.model_dump(mode="json", exclude={"raw"}))
    return results, failures


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.state_file:
        overrides["state_path"] = args.state_file
    if args.api_key:
        overrides["api_key"] = args.api_key

    try:
        config = GeocoderConfig.from_env(**overrides)
        _logger.debug("Configuration: %s", redact_for_log(dataclasses.asdict(config)))
        results, failures = asyncio.run(_geocode_all(config, args.addresses))
    except GeocodeError as exc:
        print(f"pygeocode: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(results, indent=3, ensure_ascii=False))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
