import json

import pytest

from ledger_indexer.data_types import (
    BurnPayload,
    CreateAssetResult,
    MintPayload,
    TransferFromPayload,
    TransferPayload,
)
from ledger_indexer.parsers import PAYLOAD_PARSERS, PayloadDecodeError, parse_payload

from conftest import ALICE, BOB, CAROL, TOKEN_ASSET_ID


def test_parser_table_covers_asset_methods():
    assert set(PAYLOAD_PARSERS) == {"transfer", "transfer_from", "mint", "burn", "create_asset"}


def test_transfer_payload():
    raw = json.dumps({"asset_id": TOKEN_ASSET_ID, "to": BOB, "value": 100})

    payload = parse_payload("transfer", raw, "0x01")

    assert isinstance(payload, TransferPayload)
    assert payload.to == BOB
    assert payload.value == 100


def test_transfer_from_payload_keeps_recipient_and_sender():
    raw = json.dumps({
        "asset_id": TOKEN_ASSET_ID,
        "to": BOB,
        "value": "0x64",
        "recipient": CAROL,
        "sender": ALICE,
    })

    payload = parse_payload("transfer_from", raw, "0x01")

    assert isinstance(payload, TransferFromPayload)
    assert payload.value == 100
    assert payload.recipient == CAROL
    assert payload.sender == ALICE


def test_transfer_from_payload_without_to():
    raw = json.dumps({
        "asset_id": TOKEN_ASSET_ID,
        "sender": ALICE,
        "recipient": CAROL,
        "value": 7,
        "memo": "settlement",
    })

    payload = parse_payload("transfer_from", raw, "0x01")

    assert isinstance(payload, TransferFromPayload)
    assert payload.to == ""
    assert payload.value == 7
    assert payload.recipient == CAROL


def test_mint_payload_defaults_proof_and_memo():
    raw = json.dumps({"asset_id": TOKEN_ASSET_ID, "to": BOB, "amount": 5})

    payload = parse_payload("mint", raw, "0x01")

    assert isinstance(payload, MintPayload)
    assert payload.amount == 5
    assert payload.proof == ""
    assert payload.memo == ""


def test_burn_payload_keeps_large_amounts_exact():
    raw = json.dumps({"asset_id": TOKEN_ASSET_ID, "amount": 2 ** 64 + 1})

    payload = parse_payload("burn", raw, "0x01")

    assert isinstance(payload, BurnPayload)
    assert payload.amount == 2 ** 64 + 1


class TestCreateAssetResult:
    def test_precision_goes_through_base16(self):
        raw = json.dumps({"id": TOKEN_ASSET_ID, "name": "Token", "symbol": "TK", "supply": 1000, "precision": 8})

        result = parse_payload("create_asset", raw, "0x01")

        assert isinstance(result, CreateAssetResult)
        assert result.precision == 8
        assert result.supply == 1000

    def test_two_digit_precision_is_read_as_hex(self):
        raw = json.dumps({"id": TOKEN_ASSET_ID, "name": "Token", "symbol": "TK", "supply": 1, "precision": 10})

        result = parse_payload("create_asset", raw, "0x01")

        assert result.precision == 16

    def test_negative_precision_is_rejected(self):
        raw = json.dumps({"id": TOKEN_ASSET_ID, "name": "Token", "symbol": "TK", "supply": 1, "precision": "-1"})

        with pytest.raises(PayloadDecodeError):
            parse_payload("create_asset", raw, "0x01")


class TestDecodeErrors:
    def test_invalid_json(self):
        with pytest.raises(PayloadDecodeError) as exc_info:
            parse_payload("transfer", "{not json", "0xdead")
        assert exc_info.value.tx_hash == "0xdead"
        assert exc_info.value.method == "transfer"

    def test_missing_field(self):
        with pytest.raises(PayloadDecodeError):
            parse_payload("transfer", json.dumps({"asset_id": TOKEN_ASSET_ID, "value": 1}), "0x01")

    def test_non_numeric_value(self):
        with pytest.raises(PayloadDecodeError):
            parse_payload("transfer", json.dumps({"asset_id": TOKEN_ASSET_ID, "to": BOB, "value": "abc"}), "0x01")

    def test_null_value(self):
        with pytest.raises(PayloadDecodeError):
            parse_payload("burn", json.dumps({"asset_id": TOKEN_ASSET_ID, "amount": None}), "0x01")

    def test_non_object_payload(self):
        with pytest.raises(PayloadDecodeError):
            parse_payload("burn", json.dumps([1, 2]), "0x01")

    def test_unknown_method(self):
        with pytest.raises(PayloadDecodeError):
            parse_payload("approve", "{}", "0x01")
