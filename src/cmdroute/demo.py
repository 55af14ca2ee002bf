"""
A small economy command used by the bundled shell.

    econ balance [account]     show a balance (console allowed)
    econ pay <account> <amt>   move money from the invoker (needs "pay")
    econ reset                 disabled until an operator turns it on
"""

from typing import Dict, List, Optional, Sequence

from .config.models import DispatchSettings
from .core import (
    Dispatcher, FunctionSubCommand, InstrumentationBridge, Invoker, filter_prefix, subcommand
)


class Ledger:
    """In-memory account balances."""

    def __init__(self, balances: Optional[Dict[str, int]] = None):
        self.balances: Dict[str, int] = dict(balances or {"alice": 100, "bob": 25, "carol": 0})

    def accounts(self) -> List[str]:
        return sorted(self.balances)

    def balance(self, account: str) -> int:
        return self.balances.get(account.lower(), 0)

    def transfer(self, source: str, target: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("amount must be positive")
        source, target = source.lower(), target.lower()
        if self.balance(source) < amount:
            raise ValueError(f"{source} cannot afford {amount}")
        self.balances[source] = self.balance(source) - amount
        self.balances[target] = self.balance(target) + amount


def create_dispatcher(
    settings: Optional[DispatchSettings] = None,
    instrumentation: Optional[InstrumentationBridge] = None,
    ledger: Optional[Ledger] = None
) -> Dispatcher:
    """Build the ``econ`` dispatcher over ``ledger``."""
    ledger = ledger or Ledger()

    def complete_account(invoker: Invoker, args: Sequence[str]) -> Optional[List[str]]:
        if len(args) == 2:
            return filter_prefix(ledger.accounts(), args[1])
        return None

    @subcommand(aliases=["bal"], allow_console=True, completer=complete_account)
    def balance(invoker: Invoker, args: Sequence[str]) -> bool:
        """Show the balance of an account."""
        account = args[1] if len(args) > 1 else invoker.name
        invoker.send_message(f"{account.lower()}: {ledger.balance(account)}")
        return True

    @subcommand(aliases=["p"], permission="pay", completer=complete_account)
    def pay(invoker: Invoker, args: Sequence[str]) -> bool:
        """Pay another account from your own balance."""
        if len(args) != 3:
            invoker.send_message("usage: econ pay <account> <amount>")
            return True
        try:
            amount = int(args[2])
        except ValueError:
            invoker.send_message(f"Not a number: {args[2]}")
            return True
        if ledger.balance(invoker.name) < amount:
            invoker.send_message(f"Insufficient funds: you have {ledger.balance(invoker.name)}")
            return True
        # Non-positive amounts raise and are reported as a failed execution
        ledger.transfer(invoker.name, args[1], amount)
        invoker.send_message(f"Paid {amount} to {args[1].lower()}")
        return True

    def reset(invoker: Invoker, args: Sequence[str]) -> bool:
        ledger.balances.clear()
        invoker.send_message("All balances reset")
        return True

    reset_command = FunctionSubCommand(
        "reset",
        reset,
        permission="admin",
        enabled=False,
        disabled_message="Resetting the economy is disabled.",
        allow_console=True,
    )

    return Dispatcher(
        "econ",
        settings=settings,
        instrumentation=instrumentation,
    ).add_subcommand(balance, pay, reset_command)
