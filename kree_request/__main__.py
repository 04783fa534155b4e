"""Command-line entrypoint for one-off requests."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Iterable, Sequence

from dotenv import load_dotenv

from kree_request.client import KreeRequest
from kree_request.diagnostics import LoggingSink
from kree_request.errors import ConfigurationError, RequestError, SerializationError
from kree_request.formatting import json_string
from kree_request.model import NO_BODY, Config, JsonBody, Method, RequestBody, StaticBackend, StringBody


def _parse_pairs(raw_items: Iterable[str] | None, separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in raw_items or []:
        key, sep, value = raw.partition(separator)
        if not sep or not key.strip():
            raise SystemExit(f"Invalid {label} {raw!r}; expected NAME{separator}VALUE")
        pairs[key.strip()] = value.strip() if separator == ":" else value
    return pairs


def _resolve_body(args: argparse.Namespace) -> RequestBody:
    if args.json is not None:
        try:
            return JsonBody(json.loads(args.json))
        except ValueError as exc:
            raise SystemExit(f"--json is not valid JSON: {exc}") from exc
    if args.data is not None:
        return StringBody(args.data)
    return NO_BODY


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kree_request", description="Send a single JSON REST request")
    parser.add_argument("method", type=str.upper, choices=[m.value for m in Method])
    parser.add_argument("base_url", help="API root, e.g. https://example.com/")
    parser.add_argument("path", nargs="?", default="", help="Path appended verbatim to the base URL")
    parser.add_argument(
        "-p", "--param", action="append", dest="params", metavar="KEY=VALUE", help="Query parameter"
    )
    parser.add_argument(
        "-H", "--header", action="append", dest="headers", metavar="NAME:VALUE", help="Request header"
    )
    body = parser.add_mutually_exclusive_group()
    body.add_argument("--json", help="JSON document sent as the request body")
    body.add_argument("--data", help="Raw text sent as the request body")
    parser.add_argument("--timeout", help="Timeout in seconds (defaults to KREE_REQUEST_TIMEOUT or 30)")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)")
    return parser


async def run(args: argparse.Namespace, client: KreeRequest | None = None) -> int:
    headers = _parse_pairs(args.headers, ":", "header")
    if args.json is not None:
        headers.setdefault("Content-Type", "application/json")
    config_kwargs = {}
    if args.timeout is not None:
        config_kwargs["timeout"] = args.timeout
    try:
        config = Config(
            method=Method(args.method),
            backend=StaticBackend(args.base_url),
            path=args.path,
            url_parameters=_parse_pairs(args.params, "=", "query parameter"),
            headers=headers,
            **config_kwargs,
        )
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    owned = client is None
    client = client or KreeRequest(logger=LoggingSink())
    try:
        success = await client.fetch(config, _resolve_body(args))
    except SerializationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except RequestError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if owned:
            await client.aclose()

    print(f"HTTP {success.status}")
    rendered = json_string(success.data, pretty_printed=True)
    if rendered is not None:
        print(rendered)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    return asyncio.run(run(args))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
