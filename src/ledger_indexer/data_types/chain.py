from pydantic import BaseModel
from typing import List


class Block(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    height: int
    exec_height: int
    block_hash: str
    prev_hash: str
    order_root: str
    state_root: str
    proposer: str
    proof_bitmap: str
    proof_round: int
    proof_signature: str
    validator_version: int
    timestamp: str
    transactions_count: int

class Transaction(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    tx_hash: str
    block: int
    order: int
    chain_id: str
    cycles_limit: str
    cycles_price: str
    method: str
    nonce: str
    payload: str
    pubkey: str
    service_name: str
    signature: str
    timeout: str
    sender: str

class Receipt(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    tx_hash: str
    block: int
    cycles_used: str
    is_error: bool
    ret: str

class Event(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    tx_hash: str
    block: int
    order: int
    service: str
    name: str
    data: str

class Validator(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    pubkey: str
    propose_weight: int
    vote_weight: int
    version: int

class ExecutedBlock(BaseModel):
    """A block together with everything its execution produced

    transactions[i] and receipts[i] describe the same transaction.
    """
    block: Block
    transactions: List[Transaction] = []
    receipts: List[Receipt] = []
    events: List[Event] = []
    validators: List[Validator] = []

    def height(self) -> int:
        return self.block.height

    def get_block(self) -> Block:
        return self.block

    def get_transactions(self) -> List[Transaction]:
        return self.transactions

    def get_receipts(self) -> List[Receipt]:
        return self.receipts

    def get_events(self) -> List[Event]:
        return self.events

    def get_validators(self) -> List[Validator]:
        return self.validators
