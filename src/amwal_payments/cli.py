"""
Command-line interface for exercising the Amwal payment APIs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterable, Sequence, Tuple

from .api import create_amwal_client
from .core.client import AmwalClient
from .core.errors import AmwalPayError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amwal-payments",
        description="Call the Amwal payment gateway from the command line",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing AMWAL_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("test-connection", help="Validate the merchant key pair")

    create = commands.add_parser("create-payment", help="Create a payment link")
    create.add_argument("--store-id", required=True)
    create.add_argument("--amount", required=True)
    create.add_argument("--description")
    create.add_argument("--language")
    create.add_argument("--client-email")
    create.add_argument("--client-phone", dest="client_phone_number")
    create.add_argument("--callback-url")
    create.add_argument("--origin", help="Origin header, defaults to AMWAL_DEFAULT_ORIGIN")

    details = commands.add_parser("details", help="Show a payment link or transaction")
    details.add_argument("id")
    details.add_argument(
        "--transaction",
        action="store_true",
        help="Look up a transaction instead of a payment link",
    )

    refund = commands.add_parser("refund", help="Refund part or all of a transaction")
    refund.add_argument("transaction_id")
    refund.add_argument("--amount", dest="refund_amount", required=True)

    return parser


def _payment_data(args: argparse.Namespace) -> Dict[str, Any]:
    data: Dict[str, Any] = {"amount": args.amount}
    for name in ("description", "language", "client_email", "client_phone_number", "callback_url"):
        value = getattr(args, name)
        if value is not None:
            data[name] = value
    return data


def _dispatch(client: AmwalClient, args: argparse.Namespace) -> Any:
    if args.command == "create-payment":
        return client.create_payment(_payment_data(args), args.store_id, args.origin)
    if args.command == "details":
        return client.get_payment_details(args.id, not args.transaction)
    if args.command == "refund":
        return client.refund_payment(
            {"transaction_id": args.transaction_id, "refund_amount": args.refund_amount}
        )
    return client.validate_merchant()


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        client = create_amwal_client(env_file=args.env_file, overrides=overrides)
    except AmwalPayError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        result = _dispatch(client, args)
    except AmwalPayError as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1

    json.dump(result, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


def main() -> None:
    sys.exit(run_cli())
