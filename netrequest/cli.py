#!/usr/bin/env python3
"""Fetch a URL with retries from the command line.

Usage:
  netrequest https://api.example.com/items
  netrequest https://api.example.com/items --json --retries 5 --retry-delay-ms 500
  netrequest https://api.example.com/items -X POST -H 'Content-Type: application/json' --data '{"a": 1}'
  NETREQUEST_DEBUG=1 netrequest https://api.example.com/items --full
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from netrequest.config import RequestConfig
from netrequest.helpers.errors import ParseFailure, TransportExhausted
from netrequest.helpers.http_client import make_request


def _parse_header(raw: str) -> tuple[str, str]:
    if ":" not in raw:
        raise argparse.ArgumentTypeError(f"Header must look like 'Name: value', got {raw!r}")
    name, value = raw.split(":", 1)
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"Header name is empty in {raw!r}")
    return name, value.strip()


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"Expected a non-negative integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="netrequest", description="Fetch a URL with retries.")
    parser.add_argument("url")
    parser.add_argument("-X", "--method", default="GET")
    parser.add_argument(
        "-H", "--header", dest="headers", action="append", type=_parse_header, default=[]
    )
    parser.add_argument("--data", default=None, help="Request body text.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-attempt timeout in seconds.")
    parser.add_argument("--retries", type=_non_negative_int, default=None)
    parser.add_argument("--retry-delay-ms", type=_non_negative_int, default=None)
    shape = parser.add_mutually_exclusive_group()
    shape.add_argument("--json", action="store_true", help="Parse the body as JSON.")
    shape.add_argument("--full", action="store_true", help="Print status and headers instead of the body.")
    parser.add_argument("--debug", action="store_true", help="Trace each attempt.")
    return parser


def build_descriptor(args: argparse.Namespace) -> dict[str, Any]:
    descriptor: dict[str, Any] = {
        "url": args.url,
        "method": args.method.upper(),
        "return_full_response": args.full,
        "force_json": args.json,
    }
    if args.headers:
        descriptor["headers"] = dict(args.headers)
    if args.data is not None:
        descriptor["data"] = args.data
    if args.timeout is not None:
        descriptor["timeout"] = args.timeout
    if args.retries is not None:
        descriptor["retries"] = args.retries
    if args.retry_delay_ms is not None:
        descriptor["retry_delay_ms"] = args.retry_delay_ms
    return descriptor


def render(result: Any, args: argparse.Namespace) -> str:
    if args.full:
        lines = [f"{result.status_code} {result.reason}"]
        lines.extend(f"{name}: {value}" for name, value in result.headers.items())
        return "\n".join(lines)
    if args.json:
        return json.dumps(result, indent=2, default=str)
    return "" if result is None else str(result)


async def _fetch(descriptor: dict[str, Any], config: RequestConfig) -> Any:
    return await make_request(descriptor, config=config)


def main(argv: list[str] | None = None, config: RequestConfig | None = None) -> int:
    args = build_parser().parse_args(argv)
    if config is None:
        config = RequestConfig.from_env(**({"debug": True} if args.debug else {}))

    try:
        result = asyncio.run(_fetch(build_descriptor(args), config))
    except (TransportExhausted, ParseFailure) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(render(result, args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
