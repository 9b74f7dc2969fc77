#!/usr/bin/env python3
"""Command-line interface for running single iTransact operations.

Credentials are read from ITRANSACT_API_KEY and ITRANSACT_API_SECRET.

Usage:
    python -m itransact_connector.cli --test purchase 1060 --card 4000100011112224 --month 9 --year 2030 --cvv 123
    python -m itransact_connector.cli --test capture 1060 tr_508LEItovSXZBSG8rD_DfQ
    python -m itransact_connector.cli void tr_508LEItovSXZBSG8rD_DfQ
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .connectors.base import BillingAddress, CreditCard, PaymentOptions, Result
from .connectors.itransact_connector import ItransactConnector
from .exceptions import ConfigurationError, IntegrationError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_DECLINED = 1
EXIT_FAILURE = 2


def build_options(parsed_args: argparse.Namespace) -> PaymentOptions:
    """Build payment options from card operation arguments."""
    address = None
    if parsed_args.address1 or parsed_args.zip:
        address = BillingAddress(
            address1=parsed_args.address1,
            address2=parsed_args.address2,
            city=parsed_args.city,
            state=parsed_args.state,
            zip=parsed_args.zip,
        )
    return PaymentOptions(
        email=parsed_args.email,
        billing_address=address,
        order_id=parsed_args.order_id,
        description=parsed_args.description,
    )


def run_operation(connector: ItransactConnector, parsed_args: argparse.Namespace) -> Result:
    """Dispatch the parsed command to the connector."""
    command = parsed_args.command
    if command in ("authorize", "purchase"):
        card = CreditCard(
            number=parsed_args.card,
            verification_value=parsed_args.cvv,
            month=parsed_args.month,
            year=parsed_args.year,
        )
        operation = getattr(connector, command)
        return operation(parsed_args.amount, card, build_options(parsed_args))
    if command == "capture":
        return connector.capture(parsed_args.amount, parsed_args.authorization)
    if command == "refund":
        return connector.refund(parsed_args.amount, parsed_args.authorization)
    if command == "void":
        return connector.void(parsed_args.authorization)
    raise ValueError(f"Unknown command: {command}")


def _add_card_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("amount", type=int, help="Amount in cents")
    parser.add_argument("--card", required=True, help="Card number")
    parser.add_argument("--cvv", help="Card verification value")
    parser.add_argument("--month", type=int, required=True, help="Expiry month")
    parser.add_argument("--year", type=int, required=True, help="Expiry year")
    parser.add_argument("--email", help="Customer email")
    parser.add_argument("--order-id", dest="order_id", help="Merchant order id")
    parser.add_argument("--description", help="Order description")
    parser.add_argument("--address1", help="Billing address line 1")
    parser.add_argument("--address2", help="Billing address line 2")
    parser.add_argument("--city", help="Billing city")
    parser.add_argument("--state", help="Billing state")
    parser.add_argument("--zip", help="Billing postal code")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="itransact",
        description="Run single payment operations against the iTransact API.",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        default=None,
        help="Use the iTransact test endpoint (default: ITRANSACT_TEST_MODE)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_card_arguments(subparsers.add_parser("authorize", help="Reserve funds on a card"))
    _add_card_arguments(subparsers.add_parser("purchase", help="Authorize and capture in one step"))

    capture_parser = subparsers.add_parser("capture", help="Capture an authorization")
    capture_parser.add_argument("amount", type=int, help="Amount in cents")
    capture_parser.add_argument("authorization", help="Transaction reference")

    refund_parser = subparsers.add_parser("refund", help="Refund a settled transaction")
    refund_parser.add_argument("amount", type=int, help="Amount in cents")
    refund_parser.add_argument("authorization", help="Transaction reference")

    void_parser = subparsers.add_parser("void", help="Void an unsettled transaction")
    void_parser.add_argument("authorization", help="Transaction reference")

    return parser


def main(args: Optional[list] = None, connector: Optional[ItransactConnector] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Optional list of command-line arguments (for testing).
        connector: Optional preconfigured connector (for testing).

    Returns:
        Exit code: 0 on success, 1 on decline or bad input, 2 on
        configuration or integration failure.
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not parsed_args.command:
        parser.print_help()
        return EXIT_DECLINED

    try:
        if connector is None:
            connector = ItransactConnector(test_mode=parsed_args.test)
        result = run_operation(connector, parsed_args)
    except (ConfigurationError, IntegrationError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except ValueError as e:
        logger.error(str(e))
        return EXIT_DECLINED

    print(json.dumps(result.model_dump(), indent=2))
    return EXIT_SUCCESS if result.success else EXIT_DECLINED


if __name__ == "__main__":
    sys.exit(main())
