import json
from typing import Dict, List, Optional, Tuple

import pytest

from ledger_indexer.asset_cache import AssetMetadataCache
from ledger_indexer.data_types import Block, Event, ExecutedBlock, Receipt, Transaction, Validator
from ledger_indexer.db import create_db_engine, init_db
from ledger_indexer.rpc import ServiceResponse

NATIVE_ASSET_ID = "0xf56924db538e77bb5951eb5ff0d02b88983c49c45eea30e8ae3e7234b311436c"
TOKEN_ASSET_ID = "0x5f1364a8e6230f68ccc18bc9d1000cedd522d6d63cef06ec8cbd2d1ec2a4a6b1"

ALICE = "0x755cdba6ae4f479f7164792b318b2a06c759833b"
BOB = "0xf8389d774afdad8755ef8e629e5a154fddc6325a"
CAROL = "0x016cbd9ee47a255a6f68882918dcdd9e14e6bee1"

NATIVE_ASSET = {
    "id": NATIVE_ASSET_ID,
    "name": "Huobi Token",
    "symbol": "HT",
    "supply": 1000000000000000000,
    "precision": 8,
    "admin": ALICE,
}


class FakeChainClient:
    """In-memory stand-in for ChainClient"""

    def __init__(self) -> None:
        self.service_responses: Dict[Tuple[str, str], ServiceResponse] = {}
        self.service_calls: List[Tuple[str, str, str]] = []
        self.blocks: Dict[int, dict] = {}
        self.transactions: Dict[str, dict] = {}
        self.receipts: Dict[str, dict] = {}

    def respond(self, service: str, method: str, code: int = 0, succeed_data: str = "", error_message: str = "") -> None:
        self.service_responses[(service, method)] = ServiceResponse(
            code=code, succeed_data=succeed_data, error_message=error_message
        )

    async def query_service(self, service_name: str, method: str, payload: str) -> ServiceResponse:
        self.service_calls.append((service_name, method, payload))
        return self.service_responses[(service_name, method)]

    async def get_latest_height(self) -> int:
        return max(self.blocks) if self.blocks else 0

    async def get_block(self, height: int) -> Optional[dict]:
        return self.blocks.get(height)

    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        return self.transactions.get(tx_hash)

    async def get_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.receipts.get(tx_hash)


def tx_hash_of(index: int) -> str:
    return "0x" + format(index, "064x")


def make_transaction(
    index: int,
    method: str,
    payload: dict,
    sender: str = ALICE,
    service_name: str = "asset",
    height: int = 1,
) -> Transaction:
    return Transaction(
        tx_hash=tx_hash_of(index),
        block=height,
        order=index,
        chain_id="0xb6a4d7da21443f5e816e8700eea87610e6d769657d6b8ec73028457bf2ca4036",
        cycles_limit="0xffff",
        cycles_price="0x01",
        method=method,
        nonce="0x" + format(index, "064x"),
        payload=json.dumps(payload),
        pubkey="0x02ef0cb0d7bc6c18b4bea1f5908d9106522b35ab3c399369605d4242525bda7e60",
        service_name=service_name,
        signature="0x",
        timeout="0x14",
        sender=sender,
    )


def make_receipt(index: int, is_error: bool = False, ret: str = "", height: int = 1) -> Receipt:
    return Receipt(
        tx_hash=tx_hash_of(index),
        block=height,
        cycles_used="0x5208",
        is_error=is_error,
        ret=ret,
    )


def make_fee_event(index: int, amount: int, order: int = 0, height: int = 1) -> Event:
    return Event(
        tx_hash=tx_hash_of(index),
        block=height,
        order=order,
        service="governance",
        name="ConsumedTxFee",
        data=json.dumps({"amount": amount, "owner": ALICE}),
    )


def make_block(height: int = 1, transactions_count: int = 0) -> Block:
    return Block(
        height=height,
        exec_height=max(height - 1, 0),
        block_hash="0x" + format(height, "064x"),
        prev_hash="0x" + format(max(height - 1, 0), "064x"),
        order_root="0x" + "11" * 32,
        state_root="0x" + "22" * 32,
        proposer=ALICE,
        proof_bitmap="0x01",
        proof_round=0,
        proof_signature="0x",
        validator_version=0,
        timestamp="0x0175a3b8f2c0",
        transactions_count=transactions_count,
    )


def make_executed_block(height: int, transactions, receipts, events=(), validators=None) -> ExecutedBlock:
    if validators is None:
        validators = [Validator(pubkey="0x" + "ab" * 33, propose_weight=1, vote_weight=1, version=0)]
    return ExecutedBlock(
        block=make_block(height, len(transactions)),
        transactions=list(transactions),
        receipts=list(receipts),
        events=list(events),
        validators=list(validators),
    )


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    factory = init_db(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def chain_client():
    client = FakeChainClient()
    client.respond("asset", "get_native_asset", succeed_data=json.dumps(NATIVE_ASSET))
    return client


@pytest.fixture
def asset_cache(session_factory, chain_client):
    return AssetMetadataCache(session_factory, chain_client, capacity=16, native_asset_id=NATIVE_ASSET_ID)
