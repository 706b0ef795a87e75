"""CLI entrypoint for eri-client."""

from __future__ import annotations

import argparse
import json
import os
from collections.abc import Sequence

from .client import create
from .config import DEFAULT_REQUEST_TIMEOUT, ENV_TIMEOUT, ENV_URL, ClientConfig
from .errors import InvalidConfiguration
from .logging_utils import configure_logging, get_logger
from .models import ResponseEnvelope


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Query an ERI service for email suggestions or domain completions."
    )
    parser.add_argument("--url", help=f"ERI base URL (or set {ENV_URL} env var).")
    parser.add_argument(
        "--timeout",
        type=float,
        help=f"Seconds to wait for the service (or set {ENV_TIMEOUT}; default {DEFAULT_REQUEST_TIMEOUT:g}).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("command", choices=["suggest", "autocomplete"], help="Operation to run.")
    parser.add_argument("value", help="Email address for suggest, partial domain for autocomplete.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def namespace_to_config(args: argparse.Namespace) -> ClientConfig:
    """Convert CLI args to a validated ClientConfig; flags override ERI_* env vars."""
    environ = dict(os.environ)
    if args.url:
        environ[ENV_URL] = args.url
    if args.timeout is not None:
        environ[ENV_TIMEOUT] = str(args.timeout)
    return ClientConfig.from_env(environ)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
    except InvalidConfiguration as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    results: list[ResponseEnvelope] = []
    with create(config) as client:
        operation = client.suggest if args.command == "suggest" else client.autocomplete
        operation(args.value, results.append).result()

    envelope = results[0]
    print(json.dumps(envelope, indent=2, ensure_ascii=False))
    if not envelope.ok:
        logger.warning("ERI reported a failure: %s", envelope.client_error or envelope.error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
