"""Tests for the command-line interface."""

import json
import pytest
from unittest.mock import MagicMock

from itransact_connector.cli import create_parser, main, EXIT_DECLINED, EXIT_FAILURE, EXIT_SUCCESS
from itransact_connector.exceptions import IntegrationError

from conftest import FAILURE_BODY, SUCCESS_BODY, RecordingHandler, make_connector

CARD_ARGS = ["--card", "4000100011112224", "--cvv", "123", "--month", "9", "--year", "2030"]


class TestParser:
    """Tests for argument parsing."""

    def test_purchase_arguments(self):
        args = create_parser().parse_args(["--test", "purchase", "1060", *CARD_ARGS, "--zip", "84101"])
        assert args.command == "purchase"
        assert args.amount == 1060
        assert args.month == 9
        assert args.test is True
        assert args.zip == "84101"

    def test_test_flag_defaults_to_none(self):
        args = create_parser().parse_args(["void", "tr_1"])
        assert args.test is None

    def test_card_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["authorize", "1060"])


class TestMain:
    """Tests for main()."""

    def test_purchase_success(self, capsys):
        handler = RecordingHandler(200, SUCCESS_BODY)
        exit_code = main(
            ["purchase", "1060", *CARD_ARGS, "--email", "a@b.com", "--address1", "1 Main", "--zip", "84101"],
            connector=make_connector(handler),
        )

        assert exit_code == EXIT_SUCCESS
        output = json.loads(capsys.readouterr().out)
        assert output["authorization"] == "tr_508LEItovSXZBSG8rD_DfQ"
        assert handler.last_payload["capture"] is True
        assert handler.last_payload["address"]["line1"] == "1 Main"

    def test_authorize_without_address(self):
        handler = RecordingHandler(200, SUCCESS_BODY)
        assert main(["authorize", "1060", *CARD_ARGS], connector=make_connector(handler)) == EXIT_SUCCESS
        assert handler.last_payload["capture"] is False
        assert "address" not in handler.last_payload

    @pytest.mark.parametrize(
        "argv,path",
        [
            (["capture", "1060", "tr_abc"], "/transactions/tr_abc/capture"),
            (["refund", "500", "tr_abc"], "/transactions/tr_abc/credit"),
            (["void", "tr_abc"], "/transactions/tr_abc/void"),
        ],
    )
    def test_follow_on_commands(self, argv, path):
        handler = RecordingHandler(200, SUCCESS_BODY)
        assert main(argv, connector=make_connector(handler)) == EXIT_SUCCESS
        assert handler.last_request.url.path == path

    def test_decline_exit_code(self, capsys):
        handler = RecordingHandler(500, FAILURE_BODY)
        assert main(["void", "tr_abc"], connector=make_connector(handler)) == EXIT_DECLINED
        assert json.loads(capsys.readouterr().out)["message"] == "Cannot do something"

    def test_invalid_reference_exit_code(self):
        handler = RecordingHandler(200, SUCCESS_BODY)
        assert main(["void", "tr$bad"], connector=make_connector(handler)) == EXIT_DECLINED
        assert handler.requests == []

    def test_integration_error_exit_code(self):
        connector = MagicMock()
        connector.void.side_effect = IntegrationError("Connection refused")
        assert main(["void", "tr_abc"], connector=connector) == EXIT_FAILURE

    def test_malformed_provider_error_exit_code(self):
        handler = RecordingHandler(500, {"error": {"type": "T", "message": "m", "transaction_id": 12345}})
        assert main(["void", "tr_abc"], connector=make_connector(handler)) == EXIT_FAILURE

    def test_missing_credentials_exit_code(self):
        assert main(["void", "tr_abc"]) == EXIT_FAILURE

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_DECLINED
        assert "usage" in capsys.readouterr().out.lower()
