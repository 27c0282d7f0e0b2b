"""EVM ledger gateway.

Reads use raw JSON-RPC over httpx. Transfers are built with web3.py's
contract encoding, signed locally with eth_account and broadcast with
eth_sendRawTransaction.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

import httpx
from eth_account import Account
from web3 import Web3

from phonomorph.chain.base import (
    NATIVE_DECIMALS,
    LedgerGateway,
    from_base_units,
    to_base_units,
)
from phonomorph.errors import LedgerUnavailableError, SubmissionFailedError

logger = logging.getLogger(__name__)

# ERC20 balanceOf(address) method signature
BALANCE_OF_SIGNATURE = "0x70a08231"

# ERC20 transfer ABI
TRANSFER_ABI = {
    "constant": False,
    "inputs": [
        {"name": "_to", "type": "address"},
        {"name": "_value", "type": "uint256"},
    ],
    "name": "transfer",
    "outputs": [{"name": "", "type": "bool"}],
    "type": "function",
}


class RpcError(Exception):
    """Exception raised when a JSON-RPC call fails."""
    pass


class EVMLedgerGateway(LedgerGateway):
    """Ledger gateway for a single EVM chain.

    The HTTP client is shared across requests and closed by close().
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: int,
        token_decimals: int = 18,
        gas_limit: int = 100000,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.token_decimals = token_decimals
        self.gas_limit = gas_limit
        self._client = client or httpx.AsyncClient(timeout=timeout)
        # Only used for ABI encoding, never for network access
        self._w3 = Web3()

    async def close(self) -> None:
        await self._client.aclose()

    async def _rpc(self, method: str, params: list) -> Any:
        """Perform a JSON-RPC call and return its result field."""
        try:
            response = await self._client.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": 1,
                },
            )
        except httpx.TimeoutException as e:
            raise RpcError(f"{method} timed out") from e
        except httpx.HTTPError as e:
            raise RpcError(f"{method} failed: {e}") from e

        if response.status_code != 200:
            raise RpcError(f"{method} returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON") from e

        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise RpcError(f"{method} error: {message}")

        if "result" not in data:
            raise RpcError(f"{method} returned no result")

        return data["result"]

    async def get_fee_currency_balance(self, address: str) -> Decimal:
        try:
            result = await self._rpc("eth_getBalance", [address, "latest"])
            return from_base_units(int(result, 16), NATIVE_DECIMALS)
        except (RpcError, ValueError, TypeError) as e:
            logger.error(f"Failed to get native balance for {address}: {e}")
            raise LedgerUnavailableError("Failed to query fee currency balance") from e

    async def get_token_balance(self, address: str, token_contract: str) -> Decimal:
        address_padded = address.lower().replace("0x", "").zfill(64)
        data = f"{BALANCE_OF_SIGNATURE}{address_padded}"

        try:
            result = await self._rpc(
                "eth_call", [{"to": token_contract, "data": data}, "latest"]
            )
            if result in ("0x", None):
                return Decimal("0")
            return from_base_units(int(result, 16), self.token_decimals)
        except (RpcError, ValueError, TypeError) as e:
            logger.error(f"Failed to get token balance for {address}: {e}")
            raise LedgerUnavailableError("Failed to query token balance") from e

    async def submit_transfer(
        self,
        signer_key: str,
        token_contract: str,
        to_address: str,
        amount: Decimal,
    ) -> str:
        token_amount = to_base_units(amount, self.token_decimals)

        try:
            account = Account.from_key(signer_key)

            nonce = int(
                await self._rpc("eth_getTransactionCount", [account.address, "pending"]),
                16,
            )
            gas_price = int(await self._rpc("eth_gasPrice", []), 16)

            contract = self._w3.eth.contract(
                address=Web3.to_checksum_address(token_contract),
                abi=[TRANSFER_ABI],
            )
            tx = contract.functions.transfer(
                Web3.to_checksum_address(to_address),
                token_amount,
            ).build_transaction({
                "nonce": nonce,
                "gasPrice": gas_price,
                "gas": self.gas_limit,
                "chainId": self.chain_id,
            })

            signed_tx = account.sign_transaction(tx)
            tx_hash = await self._rpc(
                "eth_sendRawTransaction", [Web3.to_hex(signed_tx.raw_transaction)]
            )
        except RpcError as e:
            logger.error(f"Transfer broadcast failed: {e}")
            raise SubmissionFailedError(str(e)) from e
        except Exception as e:
            logger.error(f"Transfer build/sign failed: {e}")
            raise SubmissionFailedError("Failed to build or sign transaction") from e

        if not isinstance(tx_hash, str) or not tx_hash.startswith("0x"):
            raise SubmissionFailedError("Node returned an invalid transaction hash")

        logger.info(f"Broadcast transfer of {amount} to {to_address}: {tx_hash}")
        return tx_hash
