"""Command-line helpers for issuing one-off Sonarr API calls."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Sequence

from .client import SonarrAPI
from .config import load_config
from .exceptions import ArgumentError, ConfigError
from .models import TransportFailure

_VERBS = ("get", "post", "put", "delete")


def _parse_param(raw: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is read as a JSON scalar when it parses as one."""

    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"invalid parameter '{raw}', expected key=value")
    try:
        parsed = json.loads(value)
    except ValueError:
        return key, value
    if isinstance(parsed, (dict, list)):
        return key, value
    return key, parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sonarr-api", description="Call a Sonarr API endpoint.")
    parser.add_argument("--config", help="Path to a YAML config file (default: $SONARR_CONFIG_PATH or sonarr.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("verb", choices=_VERBS)
    parser.add_argument("relative_url", help="Endpoint path below /api/, e.g. 'series'")
    parser.add_argument(
        "-p",
        "--param",
        dest="params",
        action="append",
        type=_parse_param,
        default=[],
        metavar="KEY=VALUE",
        help="Request parameter; repeat for more (query string for get, JSON body otherwise)",
    )
    return parser


async def _run(client: SonarrAPI, verb: str, relative_url: str, parameters: dict[str, Any]) -> Any:
    return await getattr(client, verb)(relative_url, parameters)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        client = SonarrAPI(load_config(args.config))
    except ConfigError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(_run(client, args.verb, args.relative_url, dict(args.params)))
    except ArgumentError as exc:
        print(f"invalid arguments: {exc}", file=sys.stderr)
        return 2

    if isinstance(result, TransportFailure):
        print(result.message, file=sys.stderr)
        if result.body is not None:
            print(json.dumps(result.body, indent=2, default=str), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":  # pragma: no cover - simple cli wrapper
    sys.exit(main())
