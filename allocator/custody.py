"""
Custody of the underlying asset.

The allocator only depends on the ``Custody`` protocol. ``InMemoryCustody`` is
a ledger of balances and allowances used by the back test and the tests.
"""
import logging
from collections import defaultdict
from typing import Dict, Protocol

from allocator.exceptions import CustodyException

logger = logging.getLogger(__name__)


class Custody(Protocol):
    def transfer_from(self, owner: str, recipient: str, amount: int) -> None: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...

    def balance_of(self, owner: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...


class InMemoryCustody:
    """
    Balances and allowances of the underlying asset, keyed by principal.

    ``transfer_from`` spends the allowance the owner granted to the recipient.
    """

    def __init__(self):
        self._balances: Dict[str, int] = defaultdict(int)
        self._allowances: Dict[tuple[str, str], int] = defaultdict(int)

    def mint(self, owner: str, amount: int) -> None:
        if amount < 0:
            raise CustodyException("Amount must be greater than 0")
        self._balances[owner] += amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise CustodyException("Allowance must be greater than 0")
        self._allowances[(owner, spender)] = amount

    def transfer_from(self, owner: str, recipient: str, amount: int) -> None:
        if amount > self._allowances[(owner, recipient)]:
            raise CustodyException(f"Allowance of {owner} to {recipient} is lower than {amount}")
        self.transfer(owner, recipient, amount)
        self._allowances[(owner, recipient)] -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise CustodyException("Amount must be greater than 0")
        if amount > self._balances[sender]:
            raise CustodyException(f"Balance of {sender} is lower than {amount}")
        self._balances[sender] -= amount
        self._balances[recipient] += amount
        logger.debug("Transfer: %s -> %s, amount: %s", sender, recipient, amount)

    def balance_of(self, owner: str) -> int:
        return self._balances[owner]

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances[(owner, spender)]
