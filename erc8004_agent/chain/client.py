"""web3.py backed chain clients used by the registry read and write paths."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams, Wei

from ..models import TransactionReceipt, to_hex

logger = logging.getLogger(__name__)

DEFAULT_RECEIPT_TIMEOUT = 180.0


class PublicClient:
    """Read-only access to a chain: contract calls and receipt polling."""

    def __init__(self, web3: Web3, *, receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT):
        self.web3 = web3
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_rpc_url(cls, rpc_url: str, **kwargs: Any) -> "PublicClient":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), **kwargs)

    def _function(self, address: str, abi: List[Dict[str, Any]], function_name: str, args: Sequence[Any]):
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return getattr(contract.functions, function_name)(*args)

    async def read_contract(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a view function and return the decoded value as web3.py produces it."""
        fn = self._function(address, abi, function_name, args)
        loop = asyncio.get_running_loop()
        logger.debug("eth_call %s.%s%s", address, function_name, tuple(args))
        return await loop.run_in_executor(None, fn.call)

    async def wait_for_transaction_receipt(self, tx_hash: str) -> TransactionReceipt:
        """Block until the transaction is mined and return its receipt."""
        loop = asyncio.get_running_loop()
        raw = await loop.run_in_executor(
            None,
            lambda: self.web3.eth.wait_for_transaction_receipt(
                HexBytes(tx_hash), timeout=self.receipt_timeout
            ),
        )
        return TransactionReceipt.from_web3(raw)


class WalletClient(PublicClient):
    """Chain client with a local signer able to submit contract transactions."""

    def __init__(
        self,
        web3: Web3,
        account: Optional[LocalAccount] = None,
        *,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
    ):
        super().__init__(web3, receipt_timeout=receipt_timeout)
        self.account = account
        self._nonce_cache: Dict[str, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_private_key(
        cls, rpc_url: str, private_key: Optional[str], **kwargs: Any
    ) -> "WalletClient":
        account = Account.from_key(private_key) if private_key else None
        return cls(Web3(Web3.HTTPProvider(rpc_url)), account, **kwargs)

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account is not None else None

    async def write_contract(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> str:
        """Sign and broadcast a contract call, returning the transaction hash."""
        if self.account is None:
            raise RuntimeError("WalletClient has no account attached")

        fn = self._function(address, abi, function_name, args)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._sign_and_send, self.account, fn, value)

    def _sign_and_send(self, account: LocalAccount, fn: Any, value: int) -> str:
        # Nonce allocation and broadcast must not interleave between threads.
        with self._lock:
            tx_params: TxParams = {
                "from": account.address,
                "value": Wei(value),
                "nonce": self._get_next_nonce(account.address),
                "chainId": self.web3.eth.chain_id,
            }
            try:
                tx = fn.build_transaction(tx_params)
                signed_tx = account.sign_transaction(tx)
                tx_hash = self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
            except Exception:
                # The reserved nonce was never broadcast; resync on the next call.
                self._nonce_cache.pop(account.address, None)
                raise
        logger.info("Submitted %s from %s: %s", fn.fn_name, account.address, to_hex(tx_hash))
        return to_hex(tx_hash)

    def _get_next_nonce(self, address: str) -> int:
        network_nonce = self.web3.eth.get_transaction_count(address, "pending")
        cached = self._nonce_cache.get(address)
        next_nonce = network_nonce if cached is None else max(network_nonce, cached)
        self._nonce_cache[address] = next_nonce + 1
        return next_nonce
