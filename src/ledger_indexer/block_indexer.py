import time
from functools import partial
from loguru import logger
from sqlalchemy.orm import Session, sessionmaker
from typing import Iterable, Optional

from ledger_indexer.asset_cache import AssetMetadataCache
from ledger_indexer.data_types import Asset, ExecutedBlock
from ledger_indexer.db import (
    AccountRepository,
    AssetRepository,
    BalanceRepository,
    BlockRepository,
    EventRepository,
    ReceiptRepository,
    TransactionRepository,
    TransferRepository,
    ValidatorRepository,
)
from ledger_indexer.fee_resolver import DEFAULT_FEE_EVENTS, DEFAULT_FEE_SERVICE, FeeResolver
from ledger_indexer.metrics import (
    BLOCKS_PROCESSED,
    BLOCK_PROCESSING_TIME,
    LATEST_PROCESSED_BLOCK,
    TRANSFERS_INDEXED,
)
from ledger_indexer.resolver import TransactionResolver


class BlockIndexer:
    """Writes one executed block and its resolved ledger diff atomically"""

    def __init__(
        self,
        session_factory: sessionmaker,
        asset_cache: AssetMetadataCache,
        chain_name: str = "huobi",
        fee_service: str = DEFAULT_FEE_SERVICE,
        fee_events: Optional[Iterable[str]] = None,
    ) -> None:
        self.session_factory = session_factory
        self.asset_cache = asset_cache
        self.chain_name = chain_name
        self.fee_resolver_factory = partial(
            FeeResolver,
            fee_service=fee_service,
            fee_events=tuple(fee_events) if fee_events is not None else DEFAULT_FEE_EVENTS,
        )

    def get_last_processed_height(self) -> Optional[int]:
        with self.session_factory() as session:
            return BlockRepository.get_latest_height(session)

    async def on_genesis(self) -> Asset:
        """Seed the native asset before the first block is indexed"""
        asset = await self.asset_cache.load_native_asset()
        with self.session_factory() as session:
            with session.begin():
                AssetRepository.save_assets(session, [asset.model_dump()])
        logger.info(f"Seeded native asset {asset.asset_id}")
        return asset

    async def index(self, executed: ExecutedBlock) -> None:
        """Persist a block in one transaction, nothing is committed on failure"""
        start_time = time.time()
        with self.session_factory() as session:
            with session.begin():
                transfers_count = await self.save_executed_block(session, executed)

        TRANSFERS_INDEXED.labels(chain=self.chain_name).inc(transfers_count)
        BLOCKS_PROCESSED.labels(chain=self.chain_name).inc()
        LATEST_PROCESSED_BLOCK.labels(chain=self.chain_name).set(executed.height())
        BLOCK_PROCESSING_TIME.labels(chain=self.chain_name).observe(time.time() - start_time)

    async def save_executed_block(self, session: Session, executed: ExecutedBlock) -> int:
        block = executed.get_block()
        BlockRepository.save_block(session, block.model_dump())

        transactions = executed.get_transactions()
        fee_resolver = self.fee_resolver_factory(executed.get_events())
        TransactionRepository.save_transactions(session, [
            {
                **tx.model_dump(),
                'fee': fee_resolver.fee_by_tx_hash(tx.tx_hash),
                'timestamp': block.timestamp,
            }
            for tx in transactions
        ])
        logger.info(f"{len(transactions)} transactions prepared")

        receipts = executed.get_receipts()
        ReceiptRepository.save_receipts(session, [receipt.model_dump() for receipt in receipts])
        logger.info(f"{len(receipts)} receipts prepared")

        events = executed.get_events()
        EventRepository.save_events(session, [event.model_dump() for event in events])
        logger.info(f"{len(events)} events prepared")

        ValidatorRepository.save_validators(
            session, [validator.model_dump() for validator in executed.get_validators()]
        )

        return await self.save_resolved(session, executed)

    async def save_resolved(self, session: Session, executed: ExecutedBlock) -> int:
        """Resolve the block and write its ledger diff, returns the number of transfers"""
        resolver = TransactionResolver(
            transactions=executed.get_transactions(),
            receipts=executed.get_receipts(),
            events=executed.get_events(),
            height=executed.height(),
            timestamp=executed.get_block().timestamp,
            asset_cache=self.asset_cache,
            fee_resolver_factory=self.fee_resolver_factory,
        )
        await resolver.resolve()

        logger.debug(f"Block {executed.height()}: transactions resolved to exact operations")

        AssetRepository.save_assets(session, [asset.model_dump() for asset in resolver.get_created_assets()])

        transfers = resolver.get_transfers()
        TransferRepository.save_transfers(session, [transfer.model_dump() for transfer in transfers])
        logger.debug(f"{len(transfers)} transfers prepared")

        BalanceRepository.save_balances(session, [balance.model_dump() for balance in resolver.get_balances()])
        AccountRepository.save_accounts(session, [account.model_dump() for account in resolver.get_relevant_account()])

        return len(transfers)
