import json
from loguru import logger
from typing import Dict, Iterable, List, Optional

from ledger_indexer.data_types import Event
from ledger_indexer.utils import parse_uint, to_hex

DEFAULT_FEE_SERVICE = "governance"
DEFAULT_FEE_EVENTS = ("ConsumedTxFee",)


class FeeResolver:
    """Index of the fees charged in one block, keyed by transaction hash

    Built once from the block's full event list. Events that do not look
    like a fee charge are skipped rather than raised.
    """

    def __init__(
        self,
        events: List[Event],
        fee_service: str = DEFAULT_FEE_SERVICE,
        fee_events: Optional[Iterable[str]] = None,
    ) -> None:
        self.fee_service = fee_service
        self.fee_events = frozenset(fee_events if fee_events is not None else DEFAULT_FEE_EVENTS)
        self._fees: Dict[str, int] = {}

        for event in events:
            amount = self._fee_amount(event)
            if amount is None:
                continue
            self._fees[event.tx_hash] = self._fees.get(event.tx_hash, 0) + amount

    def _fee_amount(self, event: Event) -> Optional[int]:
        if event.service != self.fee_service or event.name not in self.fee_events:
            return None
        if not event.tx_hash:
            logger.debug(f"Skipping fee event without transaction hash in block {event.block}")
            return None

        try:
            data = json.loads(event.data)
            return parse_uint(data['amount'])
        except (TypeError, ValueError, KeyError) as e:
            logger.debug(f"Skipping malformed fee event for transaction {event.tx_hash}: {e}")
            return None

    def fee_by_tx_hash(self, tx_hash: str) -> str:
        return to_hex(self._fees.get(tx_hash, 0))
