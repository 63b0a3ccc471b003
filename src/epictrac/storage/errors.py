"""Errors raised by store reads.

``StoreUnavailable`` covers everything that stops the store from answering
(connection loss, missing tables, cancellation, deadline). ``MalformedRow``
means the store answered but a row could not be decoded. Neither is retried
here; callers own retry and fallback policy.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for store read failures"""


class StoreUnavailable(StoreError):
    """The underlying store could not execute the read"""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation}: store unavailable"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class OperationCancelled(StoreUnavailable):
    """The caller's context was cancelled or its deadline passed"""

    def __init__(self, operation: str, reason: str = "cancelled"):
        self.reason = reason
        super().__init__(operation)
        self.args = (f"{operation}: {reason}",)


class MalformedRow(StoreError):
    """A returned row does not have the expected shape"""

    def __init__(self, message: str, column: Optional[str] = None, row_id: Optional[str] = None):
        self.column = column
        self.row_id = row_id
        super().__init__(message)
