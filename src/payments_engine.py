import logging
from typing import Dict, Iterable, TextIO

from csv_reader import CsvTransactionReader
from errors import ProcessingError
from models import Transaction, ClientAccount, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions to the processor strictly in input order.
    Rejected rows and rejected transactions are logged and skipped, never retried.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process CSV text stream and return final account states."""
        reader = CsvTransactionReader(stream)
        self.process_transactions(reader)
        self._stats.record_rejected_rows(reader.rejected_rows)

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Failed: {self._stats.failed}, "
            f"Rejected rows: {self._stats.rejected_rows}"
        )
        return self._state.get_all_accounts()

    def process_transactions(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            try:
                self._processor.process_transaction(transaction)
            except ProcessingError as e:
                self._stats.record_failure()
                logger.warning(f"[ {transaction} ] failed with {e.__class__.__name__}")
                continue
            self._stats.record_success()
