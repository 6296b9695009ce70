from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from smashit.config import RequestConfig
from smashit.loadgen.runner import run_load_test
from smashit.ui.terminal import render_statistics


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smashit",
        description="A simple, single machine, CLI-based HTTP load testing tool",
    )
    parser.add_argument("-u", "--url", required=True, help="The URL to load test")
    parser.add_argument("-m", "--method", default="GET", help="The HTTP method to use in the request")
    parser.add_argument("-c", "--count", type=int, default=1, help="The number of times to call the endpoint")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Request header, may be repeated",
    )
    parser.add_argument("-d", "--body", default=None, help="Request body")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every failed request")
    return parser


def _parse_headers(raw: Sequence[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        name = name.strip()
        if not sep or not name:
            msg = f"Malformed header {item!r}, expected 'Name: value'"
            raise ValueError(msg)
        headers[name] = value.strip()
    return headers


def parse_config(argv: Sequence[str] | None = None) -> tuple[RequestConfig, bool]:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = RequestConfig(
            url=args.url,
            method=args.method,
            count=args.count,
            headers=_parse_headers(args.header),
            body=args.body,
            timeout_sec=args.timeout,
        )
    except ValueError as exc:
        parser.error(str(exc))
    return config, args.verbose


def main(argv: Sequence[str] | None = None) -> None:
    config, verbose = parse_config(argv)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # transport chatter stays out of the report
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    result = asyncio.run(run_load_test(config))
    print(render_statistics(result))


if __name__ == "__main__":
    main()
