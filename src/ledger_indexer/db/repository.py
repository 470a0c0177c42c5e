from sqlalchemy import func, insert, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session
from typing import List, Optional, Sequence, Type

from .schema import (
    Account,
    Asset,
    Balance,
    Base,
    Block,
    BlockValidator,
    Event,
    Receipt,
    Transaction,
    Transfer,
)

_DIALECT_INSERTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
    'mysql': mysql.insert,
    'mariadb': mysql.insert,
}


def upsert(
    session: Session,
    model: Type[Base],
    rows: Sequence[dict],
    index_elements: Sequence[str],
    chunk_size: int = 500,
) -> None:
    """Insert rows, updating every other column when the unique key already exists

    Rows are written in chunks to stay below the bound-parameter limit of
    the backend.
    """
    if not rows:
        return

    dialect = session.get_bind().dialect.name
    dialect_insert = _DIALECT_INSERTS.get(dialect)
    if dialect_insert is None:
        raise ValueError(f"Upsert is not supported for dialect {dialect}")

    update_columns = [
        column.name for column in model.__table__.columns
        if column.name not in index_elements and not column.primary_key
    ]

    for i in range(0, len(rows), chunk_size):
        session.execute(_upsert_statement(dialect, dialect_insert, model, rows[i:i + chunk_size], index_elements, update_columns))

def _upsert_statement(dialect, dialect_insert, model, rows, index_elements, update_columns):
    stmt = dialect_insert(model).values(list(rows))

    if dialect in ('mysql', 'mariadb'):
        stmt = stmt.on_duplicate_key_update(
            **{name: stmt.inserted[name] for name in (update_columns or index_elements)}
        )
    elif update_columns:
        stmt = stmt.on_conflict_do_update(
            index_elements=list(index_elements),
            set_={name: stmt.excluded[name] for name in update_columns},
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=list(index_elements))
    return stmt

class BlockRepository:
    @staticmethod
    def save_block(session: Session, block_data: dict) -> None:
        upsert(session, Block, [block_data], ['height'])

    @staticmethod
    def get_latest_height(session: Session) -> Optional[int]:
        return session.scalar(select(func.max(Block.height)))

class TransactionRepository:
    @staticmethod
    def save_transactions(session: Session, transactions: List[dict]) -> None:
        upsert(session, Transaction, transactions, ['tx_hash'])

class ReceiptRepository:
    @staticmethod
    def save_receipts(session: Session, receipts: List[dict]) -> None:
        upsert(session, Receipt, receipts, ['tx_hash'])

class EventRepository:
    @staticmethod
    def save_events(session: Session, events: List[dict]) -> None:
        if events:
            session.execute(insert(Event), events)

class ValidatorRepository:
    @staticmethod
    def save_validators(session: Session, validators: List[dict]) -> None:
        upsert(session, BlockValidator, validators, ['pubkey', 'version'])

class AssetRepository:
    @staticmethod
    def save_assets(session: Session, assets: List[dict]) -> None:
        upsert(session, Asset, assets, ['asset_id'])

    @staticmethod
    def find_by_asset_id(session: Session, asset_id: str) -> Optional[Asset]:
        return session.scalars(select(Asset).where(Asset.asset_id == asset_id).limit(1)).first()

class TransferRepository:
    @staticmethod
    def save_transfers(session: Session, transfers: List[dict]) -> None:
        if transfers:
            session.execute(insert(Transfer), transfers)

    @staticmethod
    def get_by_tx_hash(session: Session, tx_hash: str) -> List[Transfer]:
        return list(session.scalars(select(Transfer).where(Transfer.tx_hash == tx_hash).order_by(Transfer.id)))

class BalanceRepository:
    @staticmethod
    def save_balances(session: Session, balances: List[dict]) -> None:
        upsert(session, Balance, balances, ['address', 'asset_id'])

    @staticmethod
    def get(session: Session, address: str, asset_id: str) -> Optional[Balance]:
        return session.scalars(
            select(Balance).where(Balance.address == address, Balance.asset_id == asset_id)
        ).first()

class AccountRepository:
    @staticmethod
    def save_accounts(session: Session, accounts: List[dict]) -> None:
        upsert(session, Account, accounts, ['address'])
