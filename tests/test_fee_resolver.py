import json

from ledger_indexer.data_types import Event
from ledger_indexer.fee_resolver import FeeResolver

from conftest import make_fee_event, tx_hash_of


def test_unknown_hash_returns_zero():
    resolver = FeeResolver([make_fee_event(1, 21000)])

    assert resolver.fee_by_tx_hash(tx_hash_of(2)) == "0x00"


def test_single_fee_event():
    resolver = FeeResolver([make_fee_event(1, 21000)])

    assert resolver.fee_by_tx_hash(tx_hash_of(1)) == "0x5208"


def test_multiple_fee_events_are_summed():
    resolver = FeeResolver([make_fee_event(1, 1, order=0), make_fee_event(1, 2, order=1)])

    assert resolver.fee_by_tx_hash(tx_hash_of(1)) == "0x03"


def test_hex_amounts_are_accepted():
    event = Event(
        tx_hash=tx_hash_of(1), block=1, order=0, service="governance",
        name="ConsumedTxFee", data=json.dumps({"amount": "0x0a"}),
    )

    assert FeeResolver([event]).fee_by_tx_hash(tx_hash_of(1)) == "0x0a"


def test_malformed_and_unrelated_events_are_skipped():
    events = [
        Event(tx_hash=tx_hash_of(1), block=1, order=0, service="governance", name="ConsumedTxFee", data="not json"),
        Event(tx_hash=tx_hash_of(1), block=1, order=1, service="governance", name="ConsumedTxFee", data="[]"),
        Event(tx_hash=tx_hash_of(1), block=1, order=2, service="governance", name="ConsumedTxFee", data="{}"),
        Event(tx_hash=tx_hash_of(1), block=1, order=3, service="governance", name="ConsumedTxFee",
              data=json.dumps({"amount": "lots"})),
        Event(tx_hash=tx_hash_of(1), block=1, order=4, service="asset", name="TransferAsset",
              data=json.dumps({"amount": 999})),
        Event(tx_hash="", block=1, order=5, service="governance", name="ConsumedTxFee",
              data=json.dumps({"amount": 999})),
        make_fee_event(1, 7, order=6),
    ]

    resolver = FeeResolver(events)

    assert resolver.fee_by_tx_hash(tx_hash_of(1)) == "0x07"


def test_custom_fee_event_names():
    event = Event(
        tx_hash=tx_hash_of(1), block=1, order=0, service="kyc_fee", name="Charged",
        data=json.dumps({"amount": 16}),
    )

    resolver = FeeResolver([event], fee_service="kyc_fee", fee_events=["Charged"])

    assert resolver.fee_by_tx_hash(tx_hash_of(1)) == "0x10"
