"""Transaction payloads handed to the ledger client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TransactionRequest:
    """A contract call to submit from the relay account."""

    sender: str
    to: str
    data: str
    gas_price: str | None = None

    def to_rpc(self) -> dict:
        tx: dict = {"from": self.sender, "to": self.to, "data": self.data}
        if self.gas_price:
            tx["gasPrice"] = self.gas_price
        return tx
