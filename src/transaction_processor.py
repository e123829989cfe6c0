import logging
from decimal import Decimal

from errors import (
    TransactionIdAlreadyExists,
    TransferOnLockedAccount,
    NotEnoughMoneyForWithdrawal,
    TryingToDisputeUnknownTransaction,
    WrongClientInDispute,
    TransferIsAlreadyInDispute,
    DisputingAlreadyChargedBackTransfer,
    ResolvedTransferWasNotInDispute,
    ChargedBackTransferWasNotInDispute,
)
from models import Transaction, Transfer, Amendment, TransferType, AmendmentType, ClientAccount
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies classified transactions to the ledger state, one at a time and in input order.

    Every check runs before the first mutation, so a rejected transaction
    leaves the state exactly as it was.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Process a single transaction.

        Raises:
            ProcessingError: the transaction was rejected (one subclass per reason)
        """
        match transaction:
            case Transfer():
                self._handle_transfer(transaction)
            case Amendment():
                self._handle_amendment(transaction)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

    def _handle_transfer(self, transfer: Transfer) -> None:
        if self._state.has_transfer(transfer.transaction_id):
            raise TransactionIdAlreadyExists(transfer.transaction_id)

        account = self._state.get_account(transfer.client_id)
        if account is None:
            account = ClientAccount(client_id=transfer.client_id)

        if account.locked:
            raise TransferOnLockedAccount(transfer.transaction_id)

        match transfer.transfer_type:
            case TransferType.DEPOSIT:
                account.credit(transfer.amount)
            case TransferType.WITHDRAWAL:
                if account.available < transfer.amount:
                    raise NotEnoughMoneyForWithdrawal(transfer.transaction_id)
                account.debit(transfer.amount)

        self._state.store_account(account)
        self._state.store_transfer(transfer)

    def _handle_amendment(self, amendment: Amendment) -> None:
        original = self._state.get_transfer(amendment.transaction_id)

        if original is None:
            raise TryingToDisputeUnknownTransaction(amendment.transaction_id)

        if original.client_id != amendment.client_id:
            logger.debug(
                f"{amendment.amendment_type.value} for tx {amendment.transaction_id}: "
                f"client mismatch (expected {original.client_id}, got {amendment.client_id})"
            )
            raise WrongClientInDispute(amendment.transaction_id)

        account = self._state.get_account(amendment.client_id)
        if account is None:
            raise AssertionError(f"Client account {amendment.client_id} must be present for recorded transfers")

        match amendment.amendment_type:
            case AmendmentType.DISPUTE:
                self._handle_dispute(account, original)
            case AmendmentType.RESOLVE:
                self._handle_resolve(account, original)
            case AmendmentType.CHARGEBACK:
                self._handle_chargeback(account, original)

        if account.held < Decimal("0"):
            raise AssertionError(f"Held funds went negative for client {account.client_id}")
        self._state.store_account(account)

    # Disputes move the original transfer's amount the same way for deposits and withdrawals.
    def _handle_dispute(self, account: ClientAccount, original: Transfer) -> None:
        if self._state.is_transaction_charged_back(original.transaction_id):
            raise DisputingAlreadyChargedBackTransfer(original.transaction_id)

        if self._state.is_transaction_disputed(original.transaction_id):
            raise TransferIsAlreadyInDispute(original.transaction_id)

        account.hold(original.amount)
        self._state.mark_transaction_disputed(original.transaction_id)

    def _handle_resolve(self, account: ClientAccount, original: Transfer) -> None:
        if not self._state.is_transaction_disputed(original.transaction_id):
            raise ResolvedTransferWasNotInDispute(original.transaction_id)

        account.release_hold(original.amount)
        self._state.clear_transaction_dispute(original.transaction_id)

    def _handle_chargeback(self, account: ClientAccount, original: Transfer) -> None:
        if not self._state.is_transaction_disputed(original.transaction_id):
            raise ChargedBackTransferWasNotInDispute(original.transaction_id)

        account.remove_held(original.amount)
        account.locked = True
        self._state.clear_transaction_dispute(original.transaction_id)
        self._state.mark_transaction_charged_back(original.transaction_id)
