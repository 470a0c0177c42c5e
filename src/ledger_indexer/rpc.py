"""GraphQL client for the chain node.

The node exposes blocks, transactions, receipts and read-only service
queries over a single GraphQL endpoint. Every request goes through
`_execute`, which records request/error/latency metrics and turns transport
and GraphQL errors into `RPCError`.
"""

import asyncio
import time
from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger
from pydantic import BaseModel
from typing import Any, Dict, Optional

from ledger_indexer.metrics import RPC_ERRORS, RPC_LATENCY, RPC_REQUESTS
from ledger_indexer.utils import async_retry, parse_uint, to_hex

BLOCK_QUERY = """
query GetBlock($height: Uint64) {
  getBlock(height: $height) {
    hash
    orderedTxHashes
    header {
      chainId
      height
      execHeight
      prevHash
      timestamp
      orderRoot
      stateRoot
      proposer
      validatorVersion
      proof {
        height
        round
        blockHash
        signature
        bitmap
      }
      validators {
        pubkey
        proposeWeight
        voteWeight
      }
    }
  }
}
"""

TRANSACTION_QUERY = """
query GetTransaction($txHash: Hash!) {
  getTransaction(txHash: $txHash) {
    chainId
    cyclesLimit
    cyclesPrice
    nonce
    timeout
    serviceName
    method
    payload
    pubkey
    signature
    txHash
    sender
  }
}
"""

RECEIPT_QUERY = """
query GetReceipt($txHash: Hash!) {
  getReceipt(txHash: $txHash) {
    txHash
    height
    cyclesUsed
    events {
      service
      name
      data
    }
    response {
      serviceName
      method
      response {
        code
        succeedData
        errorMessage
      }
    }
  }
}
"""

SERVICE_QUERY = """
query QueryService($serviceName: String!, $method: String!, $payload: String!) {
  queryService(serviceName: $serviceName, method: $method, payload: $payload) {
    code
    succeedData
    errorMessage
  }
}
"""


class RPCError(Exception):
    """Base exception for chain RPC errors"""
    def __init__(self, message: str, code: Optional[int] = None, method: Optional[str] = None):
        self.code = code
        self.method = method
        super().__init__(f"RPC Error [{code}] in {method}: {message}" if code is not None else message)

class ServiceResponse(BaseModel):
    code: int
    succeed_data: str = ""
    error_message: str = ""

    @property
    def is_success(self) -> bool:
        return self.code == 0

class ChainClient:
    def __init__(self, endpoint: str, chain_name: str, timeout: float = 10.0) -> None:
        logger.info(f"Initializing ChainClient for chain {chain_name} with endpoint: {endpoint}")
        self.endpoint = endpoint
        self.chain_name = chain_name
        self.timeout = ClientTimeout(total=timeout)
        self._session: Optional[ClientSession] = None

    async def __aenter__(self) -> "ChainClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def _execute(self, operation: str, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        start_time = time.time()
        try:
            async with self._get_session().post(
                self.endpoint,
                json={"query": query, "variables": variables},
            ) as response:
                response.raise_for_status()
                body = await response.json()
        except (ClientError, asyncio.TimeoutError) as e:
            RPC_ERRORS.labels(chain=self.chain_name, method=operation).inc()
            logger.error(f"Request {operation} failed: {type(e).__name__}: {str(e)}")
            raise RPCError(str(e), method=operation) from e

        RPC_REQUESTS.labels(chain=self.chain_name, method=operation).inc()
        RPC_LATENCY.labels(chain=self.chain_name, method=operation).observe(time.time() - start_time)

        if body.get('errors'):
            RPC_ERRORS.labels(chain=self.chain_name, method=operation).inc()
            message = "; ".join(error.get('message', 'Unknown error') for error in body['errors'])
            logger.error(f"Request {operation} returned errors: {message}")
            raise RPCError(message, method=operation)

        return body.get('data') or {}

    @async_retry(retries=5, base_delay=2, exponential_backoff=True, jitter=True)
    async def get_latest_height(self) -> int:
        data = await self._execute('getBlock', BLOCK_QUERY, {"height": None})
        return parse_uint(data['getBlock']['header']['height'])

    @async_retry(retries=5, base_delay=2, exponential_backoff=True, jitter=True)
    async def get_block(self, height: int) -> Optional[dict]:
        data = await self._execute('getBlock', BLOCK_QUERY, {"height": to_hex(height)})
        return data.get('getBlock')

    @async_retry(retries=5, base_delay=2, exponential_backoff=True, jitter=True)
    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        data = await self._execute('getTransaction', TRANSACTION_QUERY, {"txHash": tx_hash})
        return data.get('getTransaction')

    @async_retry(retries=5, base_delay=2, exponential_backoff=True, jitter=True)
    async def get_receipt(self, tx_hash: str) -> Optional[dict]:
        data = await self._execute('getReceipt', RECEIPT_QUERY, {"txHash": tx_hash})
        return data.get('getReceipt')

    @async_retry(retries=3, base_delay=1, exponential_backoff=True, jitter=True)
    async def query_service(self, service_name: str, method: str, payload: str) -> ServiceResponse:
        """Run a read-only service method against the latest state

        A non-zero code is returned to the caller, only transport and
        GraphQL failures raise.
        """
        data = await self._execute(
            'queryService',
            SERVICE_QUERY,
            {"serviceName": service_name, "method": method, "payload": payload},
        )
        result = data.get('queryService')
        if result is None:
            raise RPCError("empty service response", method=f"{service_name}.{method}")

        return ServiceResponse(
            code=parse_uint(result['code']),
            succeed_data=result.get('succeedData') or "",
            error_message=result.get('errorMessage') or "",
        )
