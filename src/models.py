from dataclasses import dataclass
from decimal import Context, Decimal, Inexact, InvalidOperation, MAX_EMAX, MAX_PREC, MIN_EMIN, localcontext
from enum import Enum
from typing import Optional, Union

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Exact addition and subtraction; anything that would round raises Inexact.
LEDGER_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN, traps=[Inexact, InvalidOperation])


class TransferType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class AmendmentType(Enum):
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


TransactionType = Union[TransferType, AmendmentType]


def parse_transaction_type(value: str) -> TransactionType:
    """Map a kind tag such as ``"Deposit"`` to its enum member (case-insensitive)."""
    normalized = value.strip().lower()
    for enum_type in (TransferType, AmendmentType):
        try:
            return enum_type(normalized)
        except ValueError:
            continue
    raise ValueError(f"unknown transaction type {value!r}")


@dataclass(frozen=True)
class RawTransaction:
    """A structurally decoded row whose amount has not been validated yet."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Transfer:
    transfer_type: TransferType
    client_id: int
    transaction_id: int
    amount: Decimal

    def __str__(self) -> str:
        return f"{self.transfer_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount}"


@dataclass(frozen=True)
class Amendment:
    amendment_type: AmendmentType
    client_id: int
    transaction_id: int

    def __str__(self) -> str:
        return f"{self.amendment_type.value}, client={self.client_id}, tx={self.transaction_id}"


Transaction = Union[Transfer, Amendment]


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        with localcontext(LEDGER_CONTEXT):
            return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        with localcontext(LEDGER_CONTEXT):
            self.available += amount

    def debit(self, amount: Decimal) -> None:
        with localcontext(LEDGER_CONTEXT):
            self.available -= amount

    def hold(self, amount: Decimal) -> None:
        with localcontext(LEDGER_CONTEXT):
            self.available -= amount
            self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        with localcontext(LEDGER_CONTEXT):
            self.held -= amount
            self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        with localcontext(LEDGER_CONTEXT):
            self.held -= amount


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.rejected_rows = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_rejected_rows(self, count: int):
        self.rejected_rows += count
