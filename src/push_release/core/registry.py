"""On-chain registry access and transaction submission.

Contract addresses are resolved in two hops on every run: the node reports the
name-registry address, and the registry maps a contract name to its address.
Nothing is cached across requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from eth_hash.auto import keccak

from push_release.contracts.abi import (
    GITHUBHINT_ABI,
    OPERATIONS_ABI,
    REGISTRAR_ABI,
    decode_result,
    encode_call,
    load_abi,
)
from push_release.errors import ContractLookupError
from push_release.model.transaction import TransactionRequest
from push_release.providers.base import LedgerClient

logger = logging.getLogger(__name__)

# Registry record key holding a contract address.
ADDRESS_KEY = "A"


def name_hash(name: str) -> str:
    """Registry key for a contract name: keccak-256 of the name."""
    return "0x" + keccak(name.encode("utf-8")).hex()


def _is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


class RegistryClient:
    """Wraps the ledger client with registry lookups and contract calls."""

    def __init__(
        self,
        ledger: LedgerClient,
        *,
        account_address: str,
        account_password: str | None = None,
        gas_price: str | None = None,
        abi_dir: Path | None = None,
    ) -> None:
        self._ledger = ledger
        self.account_address = account_address
        self._password = account_password
        self.gas_price = gas_price
        self.registrar_abi = load_abi(REGISTRAR_ABI, abi_dir)
        self.githubhint_abi = load_abi(GITHUBHINT_ABI, abi_dir)
        self.operations_abi = load_abi(OPERATIONS_ABI, abi_dir)

    def registry_address(self) -> str:
        address = self._ledger.registry_address()
        logger.info("Registry address: %s", address)
        return address

    def lookup(self, registry_address: str, name: str) -> str:
        """Resolve a contract *name* through the registry at *registry_address*."""
        data = encode_call(
            self.registrar_abi, "getAddress", [name_hash(name), ADDRESS_KEY]
        )
        output = self._ledger.call(registry_address, data)
        (address,) = decode_result(self.registrar_abi, "getAddress", output)
        if _is_zero_address(address):
            raise ContractLookupError(f"Contract {name!r} is not registered")
        logger.info("%s address: %s", name, address)
        return address

    def build_transaction(
        self, abi: Sequence[dict[str, Any]], address: str, method: str, args: Sequence[Any]
    ) -> TransactionRequest:
        return TransactionRequest(
            sender=self.account_address,
            to=address,
            data=encode_call(abi, method, args),
            gas_price=self.gas_price,
        )

    def submit(
        self, abi: Sequence[dict[str, Any]], address: str, method: str, args: Sequence[Any]
    ) -> str:
        """Encode and submit a call; returns the transaction hash.

        Does not wait for the transaction to be mined.
        """
        tx = self.build_transaction(abi, address, method, args).to_rpc()
        if self._password is None:
            tx_hash = self._ledger.send_transaction(tx)
        else:
            tx_hash = self._ledger.sign_and_send_transaction(tx, self._password)
        logger.info("Transaction %s sent with hash: %s", method, tx_hash)
        return tx_hash
