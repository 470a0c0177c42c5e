from loguru import logger
from typing import Awaitable, Callable, Dict, List, Optional, Set

from ledger_indexer.asset_cache import AssetMetadataCache
from ledger_indexer.data_types import (
    ASSET_SERVICE,
    Account,
    Asset,
    Balance,
    BalanceKey,
    BurnPayload,
    CreateAssetResult,
    Event,
    MintPayload,
    Receipt,
    Transaction,
    Transfer,
    TransferFromPayload,
    TransferPayload,
)
from ledger_indexer.fee_resolver import FeeResolver
from ledger_indexer.parsers import parse_payload
from ledger_indexer.utils import to_hex


class TransactionResolver:
    """Derives the ledger diff of one executed block

    transactions[i] must correspond to receipts[i]. Call `resolve()` once,
    then read the accumulated assets, transfers, balance touches and
    accounts.
    """

    def __init__(
        self,
        transactions: List[Transaction],
        receipts: List[Receipt],
        events: List[Event],
        height: int,
        timestamp: str,
        asset_cache: AssetMetadataCache,
        fee_resolver_factory: Callable[[List[Event]], FeeResolver] = FeeResolver,
    ) -> None:
        if asset_cache.native_asset_id is None:
            raise ValueError("Native asset id must be loaded before resolving transactions")

        self.txs = transactions
        self.receipts = receipts
        self.events = events
        self.height = height
        self.timestamp = timestamp
        self.asset_cache = asset_cache
        self.fee_resolver_factory = fee_resolver_factory

        self.transfers: List[Transfer] = []
        self.assets: List[Asset] = []
        self.balances: List[Balance] = []
        # dict keeps first-seen order
        self.accounts: Dict[str, None] = {}
        # balance rows already emitted for this block
        self.visited: Set[BalanceKey] = set()

        self._handlers: Dict[str, Callable[[Transaction, Receipt, FeeResolver], Awaitable[None]]] = {
            "transfer": self._on_transfer,
            "transfer_from": self._on_transfer_from,
            "mint": self._on_mint,
            "burn": self._on_burn,
            "create_asset": self._on_create_asset,
        }

    async def resolve(self) -> None:
        await self._walk()

    def get_created_assets(self) -> List[Asset]:
        return self.assets

    def get_transfers(self) -> List[Transfer]:
        return self.transfers

    def get_balances(self) -> List[Balance]:
        return self.balances

    def get_relevant_account(self) -> List[Account]:
        return [Account(address=address) for address in self.accounts]

    async def _walk(self) -> None:
        fee_resolver = self.fee_resolver_factory(self.events)

        for index, (tx, receipt) in enumerate(zip(self.txs, self.receipts)):
            # Halts the rest of the block rather than skipping this transaction
            if receipt.is_error or tx.service_name != ASSET_SERVICE:
                logger.debug(
                    f"Block {self.height}: stopped resolving at transaction {index} ({tx.tx_hash}), "
                    f"service={tx.service_name} is_error={receipt.is_error}"
                )
                return

            handler = self._handlers.get(tx.method)
            if handler is not None:
                await handler(tx, receipt, fee_resolver)

    async def _on_transfer(self, tx: Transaction, receipt: Receipt, fee_resolver: FeeResolver) -> None:
        payload: TransferPayload = parse_payload(tx.method, tx.payload, tx.tx_hash)
        await self._enqueue_transfer(payload.asset_id, tx.sender, payload.to, payload.value, tx.tx_hash, fee_resolver)

        self._enqueue_balance(tx.sender, payload.asset_id)
        self._enqueue_balance(payload.to, payload.asset_id)

    async def _on_transfer_from(self, tx: Transaction, receipt: Receipt, fee_resolver: FeeResolver) -> None:
        payload: TransferFromPayload = parse_payload(tx.method, tx.payload, tx.tx_hash)
        await self._enqueue_transfer(payload.asset_id, tx.sender, payload.to, payload.value, tx.tx_hash, fee_resolver)

        self._enqueue_balance(tx.sender, payload.asset_id)
        self._enqueue_balance(payload.recipient, payload.asset_id)
        self._enqueue_balance(payload.sender, payload.asset_id)

    async def _on_mint(self, tx: Transaction, receipt: Receipt, fee_resolver: FeeResolver) -> None:
        payload: MintPayload = parse_payload(tx.method, tx.payload, tx.tx_hash)
        await self._enqueue_transfer(payload.asset_id, tx.sender, payload.to, payload.amount, tx.tx_hash, fee_resolver)

        self._enqueue_balance(tx.sender, payload.asset_id)
        self._enqueue_balance(payload.to, payload.asset_id)

    async def _on_burn(self, tx: Transaction, receipt: Receipt, fee_resolver: FeeResolver) -> None:
        payload: BurnPayload = parse_payload(tx.method, tx.payload, tx.tx_hash)
        await self._enqueue_transfer(payload.asset_id, tx.sender, "", payload.amount, tx.tx_hash, fee_resolver)

        self._enqueue_balance(tx.sender, payload.asset_id)

    async def _on_create_asset(self, tx: Transaction, receipt: Receipt, fee_resolver: FeeResolver) -> None:
        result: CreateAssetResult = parse_payload(tx.method, receipt.ret, tx.tx_hash)
        asset = Asset(
            asset_id=result.id,
            name=result.name,
            symbol=result.symbol,
            supply=to_hex(result.supply),
            precision=result.precision,
            account=tx.sender,
            tx_hash=tx.tx_hash,
        )
        # Later blocks resolve the asset without a store round-trip
        self.asset_cache.cache(asset)
        self.assets.append(asset)

        self._enqueue_balance(tx.sender, result.id)

    async def _enqueue_transfer(
        self,
        asset_id: str,
        from_address: str,
        to_address: str,
        value: int,
        tx_hash: str,
        fee_resolver: FeeResolver,
    ) -> None:
        hex_value = to_hex(value)
        self.transfers.append(Transfer(
            asset=to_hex(asset_id),
            from_address=from_address,
            to_address=to_address,
            tx_hash=tx_hash,
            value=hex_value,
            amount=await self.asset_cache.amount_by_asset_id_and_value(asset_id, hex_value),
            fee=fee_resolver.fee_by_tx_hash(tx_hash),
            block=self.height,
            timestamp=self.timestamp,
        ))

    def _enqueue_balance(self, address: Optional[str], asset_id: str) -> None:
        if not address:
            return
        self.accounts[address] = None

        key = BalanceKey(address, asset_id)
        if key in self.visited:
            return
        # Fees are always paid in the native asset
        self._touch(BalanceKey(address, self.asset_cache.native_asset_id))
        self._touch(key)

    def _touch(self, key: BalanceKey) -> None:
        if key in self.visited:
            return
        self.visited.add(key)
        # Placeholder, the real balance is synced from the chain
        self.balances.append(Balance(address=key.address, asset_id=key.asset_id))
