from loguru import logger
from typing import List, Optional

from ledger_indexer.data_types import (
    Block,
    Event,
    ExecutedBlock,
    Receipt,
    Transaction,
    Validator,
)
from ledger_indexer.parsers import (
    BlockParser,
    EventParser,
    ReceiptParser,
    TransactionParser,
    ValidatorParser,
)
from ledger_indexer.rpc import ChainClient, RPCError


class RemoteFetcher:
    """Builds ExecutedBlocks from the chain node, one height at a time"""

    def __init__(self, client: ChainClient) -> None:
        self.client = client

    async def fetch_executed_block(self, height: int) -> Optional[ExecutedBlock]:
        raw_block = await self.client.get_block(height)
        if raw_block is None:
            logger.warning(f"Block {height} not found")
            return None

        block = Block(**BlockParser.parse_raw(raw_block))

        transactions: List[Transaction] = []
        receipts: List[Receipt] = []
        events: List[Event] = []

        # Fetch each transaction and its receipt together so positions stay aligned
        for order, tx_hash in enumerate(raw_block.get('orderedTxHashes') or []):
            raw_tx = await self.client.get_transaction(tx_hash)
            raw_receipt = await self.client.get_receipt(tx_hash)
            if raw_tx is None or raw_receipt is None:
                raise RPCError(f"Transaction or receipt {tx_hash} of block {height} not available", method='getReceipt')

            transactions.append(Transaction(**TransactionParser.parse_raw(raw_tx, block.height, order)))
            receipts.append(Receipt(**ReceiptParser.parse_raw(raw_receipt, block.height)))

            for raw_event in raw_receipt.get('events') or []:
                events.append(Event(**EventParser.parse_raw(raw_event, tx_hash, block.height, len(events))))

        validators = [
            Validator(**ValidatorParser.parse_raw(raw_validator, block.validator_version))
            for raw_validator in raw_block['header'].get('validators') or []
        ]

        return ExecutedBlock(
            block=block,
            transactions=transactions,
            receipts=receipts,
            events=events,
            validators=validators,
        )
