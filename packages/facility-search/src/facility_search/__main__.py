from __future__ import annotations

import argparse
import asyncio
import json
import logging

from facility_search.aggregator import build_aggregator
from facility_search.config import load_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="facility_search", description="Search medical facilities near a point.")
    parser.add_argument("lat", type=float)
    parser.add_argument("lng", type=float)
    parser.add_argument("--radius-km", type=float, default=5.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    aggregator = build_aggregator(load_settings())
    facilities = asyncio.run(aggregator.search(args.lat, args.lng, args.radius_km))
    print(json.dumps([facility.to_dict() for facility in facilities], ensure_ascii=True, indent=2))


if __name__ == "__main__":
    main()
