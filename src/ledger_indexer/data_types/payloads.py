from pydantic import BaseModel, field_validator
from typing import Union

from ledger_indexer.utils import parse_uint


class BasePayload(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
        "extra": "ignore",
    }

class TransferPayload(BasePayload):
    asset_id: str
    to: str
    value: int

    @field_validator('value', mode='before')
    @classmethod
    def _uint(cls, v):
        return parse_uint(v)

class TransferFromPayload(BasePayload):
    asset_id: str
    # may be absent, the transfer is then recorded with an empty recipient
    to: str = ""
    value: int
    recipient: str
    sender: str

    @field_validator('value', mode='before')
    @classmethod
    def _uint(cls, v):
        return parse_uint(v)

class MintPayload(BasePayload):
    asset_id: str
    to: str
    amount: int
    proof: str = ""
    memo: str = ""

    @field_validator('amount', mode='before')
    @classmethod
    def _uint(cls, v):
        return parse_uint(v)

class BurnPayload(BasePayload):
    asset_id: str
    amount: int

    @field_validator('amount', mode='before')
    @classmethod
    def _uint(cls, v):
        return parse_uint(v)

# Decoded from the receipt's return value, not the transaction payload
class CreateAssetResult(BasePayload):
    id: str
    name: str
    symbol: str
    supply: int
    precision: int

    @field_validator('supply', mode='before')
    @classmethod
    def _uint(cls, v):
        return parse_uint(v)

    @field_validator('precision', mode='before')
    @classmethod
    def _base16_precision(cls, v):
        # The chain reports precision through a base-16 parse of its textual form
        if isinstance(v, bool):
            raise ValueError("precision must be a number or string")
        precision = int(str(v), 16)
        if precision < 0:
            raise ValueError(f"precision must not be negative, got {v}")
        return precision

Payload = Union[TransferPayload, TransferFromPayload, MintPayload, BurnPayload, CreateAssetResult]
