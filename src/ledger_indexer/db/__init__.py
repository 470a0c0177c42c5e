from .database import create_db_engine, init_db
from .repository import (
    AccountRepository,
    AssetRepository,
    BalanceRepository,
    BlockRepository,
    EventRepository,
    ReceiptRepository,
    TransactionRepository,
    TransferRepository,
    ValidatorRepository,
    upsert,
)
