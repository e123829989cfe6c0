from typing import Dict, Optional, Set

from models import Transfer, ClientAccount


class StateManager:
    """
    Ledger state for a single processing run.
    Stores client accounts and the transfer history used for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transfers: Dict[int, Transfer] = {}
        self._disputed_transaction_ids: Set[int] = set()
        self._charged_back_transaction_ids: Set[int] = set()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve an existing account, or None if the client was never seen."""
        return self._accounts.get(client_id)

    def store_account(self, account: ClientAccount) -> None:
        self._accounts[account.client_id] = account

    def store_transfer(self, transfer: Transfer) -> None:
        """Store transfer for future dispute lookups and duplicate id checks."""
        self._transfers[transfer.transaction_id] = transfer

    def get_transfer(self, transaction_id: int) -> Optional[Transfer]:
        """Retrieve stored transfer by ID."""
        return self._transfers.get(transaction_id)

    def has_transfer(self, transaction_id: int) -> bool:
        return transaction_id in self._transfers

    def mark_transaction_disputed(self, transaction_id: int) -> None:
        """Mark a transaction as disputed."""
        self._disputed_transaction_ids.add(transaction_id)

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        """Check if transaction is currently disputed."""
        return transaction_id in self._disputed_transaction_ids

    def clear_transaction_dispute(self, transaction_id: int) -> None:
        """Clear dispute status for a transaction."""
        self._disputed_transaction_ids.discard(transaction_id)

    def mark_transaction_charged_back(self, transaction_id: int) -> None:
        self._charged_back_transaction_ids.add(transaction_id)

    def is_transaction_charged_back(self, transaction_id: int) -> bool:
        """Charged back transactions can never be disputed again."""
        return transaction_id in self._charged_back_transaction_ids

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
