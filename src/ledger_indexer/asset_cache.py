"""Asset metadata cache and fixed-point amount conversion.

Assets are looked up by id far more often than they are created, so the
cache keeps a bounded LRU of recently used assets in front of the store.
Amounts are computed with `decimal.Decimal` because chain values routinely
exceed what a float can represent exactly.
"""

import json
from cachetools import LRUCache
from decimal import Decimal, localcontext
from loguru import logger
from sqlalchemy.orm import sessionmaker
from typing import Optional, Union

from ledger_indexer.data_types import ASSET_SERVICE, Asset, AssetBalance
from ledger_indexer.db import AssetRepository
from ledger_indexer.rpc import ChainClient, RPCError
from ledger_indexer.utils import parse_uint, to_hex

# Enough significant digits for any u128 value at any precision
AMOUNT_PRECISION = 100


def to_amount(value: Union[int, str], precision: int) -> str:
    """Shift a raw fixed-point value right by `precision` decimal places

    Args:
        value: Raw value, either an int or a base-16 string with or without 0x
        precision: Number of decimal places of the asset

    Returns:
        str: Plain decimal representation, e.g. ("64", 8) -> "0.000001"
    """
    if isinstance(value, str):
        digits = value[2:] if value[:2].lower() == '0x' else value
        raw = int(digits, 16) if digits else 0
    else:
        raw = int(value)

    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        amount = Decimal(raw).scaleb(-int(precision)).normalize()
        return format(amount, 'f')

class AssetMetadataCache:
    def __init__(
        self,
        session_factory: sessionmaker,
        client: ChainClient,
        capacity: int = 1000,
        native_asset_id: Optional[str] = None,
    ) -> None:
        self.session_factory = session_factory
        self.client = client
        self.native_asset_id = native_asset_id
        self._cache: LRUCache = LRUCache(maxsize=capacity)

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def cache(self, asset: Asset) -> None:
        self._cache[asset.asset_id] = asset

    async def get(self, asset_id: str) -> Optional[Asset]:
        asset = self._cache.get(asset_id)
        if asset is not None:
            return asset

        logger.debug(f"Asset {asset_id} not cached, querying store")
        with self.session_factory() as session:
            row = AssetRepository.find_by_asset_id(session, asset_id)
            if row is None:
                return None
            asset = self._from_row(row)

        self.cache(asset)
        return asset

    @staticmethod
    def _from_row(row) -> Asset:
        return Asset(
            asset_id=row.asset_id,
            name=row.name,
            symbol=row.symbol,
            supply=row.supply,
            precision=row.precision,
            account=row.account,
            tx_hash=row.tx_hash,
        )

    async def amount_by_asset_id_and_value(self, asset_id: str, value: Union[int, str]) -> str:
        asset = await self.get(asset_id)
        if asset is None:
            return "0"
        return to_amount(value, asset.precision)

    async def get_balance(self, asset_id: str, address: str, with_amount: bool = True) -> AssetBalance:
        """Query the live balance of an address from the asset service"""
        try:
            res = await self.client.query_service(
                ASSET_SERVICE,
                'get_balance',
                json.dumps({"user": address, "asset_id": to_hex(asset_id)}),
            )
        except RPCError as e:
            logger.warning(f"balance query failed, asset_id: {asset_id}. address: {address} - {e}")
            return AssetBalance(value="0x00", amount="0")

        if not res.is_success:
            logger.info(
                f"balance not found, asset_id: {asset_id}. address: {address} - {res.code} : {res.error_message}"
            )
            return AssetBalance(value="0x00", amount="0")

        value = to_hex(parse_uint(json.loads(res.succeed_data)['balance']))
        if not with_amount:
            return AssetBalance(value=value)

        return AssetBalance(
            value=value,
            amount=await self.amount_by_asset_id_and_value(asset_id, value),
        )

    async def load_native_asset(self) -> Asset:
        """Fetch the chain's native asset, cache it and remember its id"""
        res = await self.client.query_service(ASSET_SERVICE, 'get_native_asset', '')
        if not res.is_success:
            raise RPCError(res.error_message, code=res.code, method='asset.get_native_asset')

        data = json.loads(res.succeed_data)
        asset = Asset(
            asset_id=data['id'],
            name=data['name'],
            symbol=data['symbol'],
            supply=to_hex(parse_uint(data['supply'])),
            precision=int(data['precision']),
            account=data.get('admin', ''),
            tx_hash='',
        )
        self.cache(asset)
        self.native_asset_id = asset.asset_id
        logger.info(f"Native asset {asset.symbol} ({asset.asset_id}) with precision {asset.precision}")
        return asset
