from pydantic import BaseModel
from typing import NamedTuple, Optional


class BalanceKey(NamedTuple):
    address: str
    asset_id: str

class Asset(BaseModel):
    asset_id: str
    name: str
    symbol: str
    supply: str
    precision: int
    account: str
    tx_hash: str

class Transfer(BaseModel):
    asset: str
    from_address: str
    to_address: str
    tx_hash: str
    value: str
    amount: str
    fee: str
    block: int
    timestamp: str

class Balance(BaseModel):
    # Placeholder only, the real balance is synced from the chain
    address: str
    asset_id: str
    balance: str = "0"

class Account(BaseModel):
    address: str

class AssetBalance(BaseModel):
    # hex formatted raw balance
    value: str
    # decimal amount, only present when requested
    amount: Optional[str] = None
