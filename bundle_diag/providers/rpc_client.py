"""JSON-RPC client for Ethereum-compatible nodes."""
import httpx
from typing import Any, Optional
import logging

from ..config import config

logger = logging.getLogger(__name__)


class RPCClient:
    """Async JSON-RPC 2.0 client."""

    def __init__(
        self,
        url: str,
        timeout: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self._request_id = 0

    async def call(
        self,
        method: str,
        params: list[Any] | None = None,
        timeout: Optional[int] = None,
    ) -> Any:
        """Make JSON-RPC call."""
        self._request_id += 1

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._request_id,
        }

        timeout_val = timeout or self.timeout

        try:
            async with httpx.AsyncClient(
                timeout=timeout_val, transport=self.transport
            ) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()

                data = response.json()

                if "error" in data:
                    raise RPCError(
                        code=data["error"].get("code"),
                        message=data["error"].get("message"),
                        data=data["error"].get("data"),
                    )

                return data.get("result")

        except RPCError:
            raise
        except httpx.TimeoutException:
            raise RPCError(code=-32001, message="Request timeout")
        except httpx.HTTPError as e:
            raise RPCError(code=-32002, message=f"HTTP error: {e}")
        except Exception as e:
            raise RPCError(code=-32003, message=f"Unknown error: {e}")

    async def eth_get_transaction_receipt(self, tx_hash: str) -> dict:
        """Get transaction receipt, raising if the node does not know it."""
        result = await self.call("eth_getTransactionReceipt", [tx_hash])
        if not result:
            raise RPCError(code=-32004, message=f"Receipt not found: {tx_hash}")
        return result


class RPCError(Exception):
    """RPC error exception."""

    def __init__(
        self,
        code: Optional[int] = None,
        message: str = "RPC error",
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC Error {code}: {message}")


def default_client() -> RPCClient:
    """Client for the configured RPC endpoint."""
    return RPCClient(config.rpc_url, timeout=config.rpc_timeout_default)
