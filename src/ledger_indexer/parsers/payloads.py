import json
from pydantic import ValidationError
from typing import Dict, Type

from ledger_indexer.data_types import (
    BurnPayload,
    CreateAssetResult,
    MintPayload,
    Payload,
    TransferFromPayload,
    TransferPayload,
)


class PayloadDecodeError(Exception):
    """Raised when a transaction payload or receipt return value cannot be decoded"""
    def __init__(self, method: str, tx_hash: str, reason: str):
        self.method = method
        self.tx_hash = tx_hash
        self.reason = reason
        super().__init__(f"Failed to decode {method} payload of transaction {tx_hash}: {reason}")

# Mapping to connect asset service methods with their payload types
PAYLOAD_PARSERS: Dict[str, Type[Payload]] = {
    "transfer": TransferPayload,
    "transfer_from": TransferFromPayload,
    "mint": MintPayload,
    "burn": BurnPayload,
    "create_asset": CreateAssetResult,
}

def parse_payload(method: str, raw: str, tx_hash: str) -> Payload:
    """Decode the JSON text of an asset service call into its payload type

    Raises:
        PayloadDecodeError: unknown method, invalid JSON or unexpected shape
    """
    payload_class = PAYLOAD_PARSERS.get(method)
    if payload_class is None:
        raise PayloadDecodeError(method, tx_hash, "no payload type registered")

    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise PayloadDecodeError(method, tx_hash, f"invalid JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise PayloadDecodeError(method, tx_hash, f"expected an object, got {type(decoded).__name__}")

    try:
        return payload_class(**decoded)
    except (ValidationError, TypeError, ValueError) as e:
        raise PayloadDecodeError(method, tx_hash, str(e)) from e
