class InputFormatError(Exception):
    """Raised before a record reaches the ledger. The row is dropped."""


class MalformedHeaderError(InputFormatError):
    pass


class RowDecodeError(InputFormatError):
    pass


class MissingAmountError(InputFormatError):
    def __init__(self, message: str = "transfer requires an amount"):
        super().__init__(message)


class NegativeAmountError(InputFormatError):
    def __init__(self, message: str = "transfer amount must not be negative"):
        super().__init__(message)


class ProcessingError(Exception):
    """
    Raised by the transaction processor when a record cannot be applied.
    Ledger state is left unchanged.
    """

    def __init__(self, transaction_id: int):
        super().__init__(f"tx {transaction_id}: {self.__class__.__name__}")
        self.transaction_id = transaction_id


class TransactionIdAlreadyExists(ProcessingError):
    pass


class TransferOnLockedAccount(ProcessingError):
    pass


class NotEnoughMoneyForWithdrawal(ProcessingError):
    pass


class TryingToDisputeUnknownTransaction(ProcessingError):
    pass


class WrongClientInDispute(ProcessingError):
    pass


class TransferIsAlreadyInDispute(ProcessingError):
    pass


class DisputingAlreadyChargedBackTransfer(ProcessingError):
    pass


class ResolvedTransferWasNotInDispute(ProcessingError):
    pass


class ChargedBackTransferWasNotInDispute(ProcessingError):
    pass
