"""
Raw JSON-RPC client used by the endpoint scenarios.

Talks HTTP directly (no web3 middleware) so tests can assert on the
status code and the untouched response body.
"""
import itertools
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..utils.deadline import Deadline
from ..utils.errors import DeadlineExceeded, RPCError

logger = logging.getLogger(__name__)


@dataclass
class RPCResponse:
    """HTTP status plus decoded JSON-RPC envelope"""
    status_code: int
    body: Dict[str, Any]
    raw: str

    @property
    def result(self) -> Any:
        return self.body.get('result')

    @property
    def error(self) -> Optional[Dict[str, Any]]:
        return self.body.get('error')

    @property
    def has_result(self) -> bool:
        return self.body.get('result') is not None

    def quantity(self) -> int:
        """Decode ``result`` as a hex-encoded JSON-RPC quantity"""
        value = self.result
        try:
            return int(value, 16)
        except (TypeError, ValueError) as e:
            raise RPCError(
                f"result is not a hex quantity: {self.raw[:200]}", self.status_code) from e


class RPCClient:
    """Minimal JSON-RPC over HTTP client bounded by a per-test deadline"""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 10.0,
        deadline: Optional[Deadline] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.deadline = deadline
        self._ids = itertools.count(1)
        self._client = httpx.Client(
            headers={'Content-Type': 'application/json'},
            transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _timeout(self) -> float:
        if self.deadline is None:
            return self.timeout
        return self.deadline.timeout_for(self.timeout)

    def call(self, method: str, params: Optional[List[Any]] = None) -> RPCResponse:
        """
        POST a single JSON-RPC request

        Raises:
            DeadlineExceeded: deadline spent before or during the call
            RPCError: non-200 status or a body that is not a JSON object
        """
        payload = {
            'jsonrpc': '2.0',
            'method': method,
            'params': params or [],
            'id': next(self._ids)
        }
        timeout = self._timeout()

        try:
            response = self._client.post(
                self.endpoint_url,
                content=json.dumps(payload),
                timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise DeadlineExceeded(f"{method} timed out after {timeout:.1f}s") from e
        except httpx.TransportError as e:
            raise RPCError(f"{method} transport error: {e}") from e

        logger.debug(f"RPC {method} -> {response.status_code}: {response.text}")

        if response.status_code != 200:
            raise RPCError(
                f"{method} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RPCError(
                f"{method} returned non-JSON body: {response.text[:200]}",
                status_code=response.status_code
            ) from e
        if not isinstance(body, dict):
            raise RPCError(
                f"{method} returned unexpected JSON: {response.text[:200]}",
                status_code=response.status_code
            )

        return RPCResponse(status_code=response.status_code, body=body, raw=response.text)

    def block_number(self) -> int:
        response = self.call('eth_blockNumber')
        if not response.has_result:
            raise RPCError(f"eth_blockNumber returned no result: {response.raw}", 200)
        return response.quantity()
