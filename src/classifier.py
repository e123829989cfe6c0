import logging
from decimal import Decimal

from errors import MissingAmountError, NegativeAmountError
from models import RawTransaction, Transaction, TransferType, AmendmentType, Transfer, Amendment

logger = logging.getLogger(__name__)


def classify_transaction(raw: RawTransaction) -> Transaction:
    """
    Turn a decoded row into a Transfer or an Amendment.

    Raises:
        MissingAmountError: a deposit or withdrawal without an amount
        NegativeAmountError: a deposit or withdrawal with an amount below zero
    """
    match raw.transaction_type:
        case AmendmentType() as amendment_type:
            if raw.amount is not None:
                logger.warning(
                    f"Amount {raw.amount} on {amendment_type.value} for tx {raw.transaction_id} will be ignored, "
                    f"only the entire transfer can be disputed"
                )
            return Amendment(
                amendment_type=amendment_type,
                client_id=raw.client_id,
                transaction_id=raw.transaction_id,
            )
        case TransferType() as transfer_type:
            if raw.amount is None:
                raise MissingAmountError(f"{transfer_type.value} tx {raw.transaction_id} has no amount")
            if raw.amount < Decimal("0"):
                raise NegativeAmountError(
                    f"{transfer_type.value} tx {raw.transaction_id} has negative amount {raw.amount}"
                )
            return Transfer(
                transfer_type=transfer_type,
                client_id=raw.client_id,
                transaction_id=raw.transaction_id,
                amount=raw.amount,
            )
        case _:
            raise TypeError(f"Unsupported transaction type: {raw.transaction_type!r}")
