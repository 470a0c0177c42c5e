from .chain import (
    Block,
    Event,
    ExecutedBlock,
    Receipt,
    Transaction,
    Validator,
)
from .ledger import (
    Account,
    Asset,
    AssetBalance,
    Balance,
    BalanceKey,
    Transfer,
)
from .payloads import (
    BurnPayload,
    CreateAssetResult,
    MintPayload,
    Payload,
    TransferFromPayload,
    TransferPayload,
)

# Every asset operation lives in this service
ASSET_SERVICE = "asset"
