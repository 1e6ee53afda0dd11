"""
Exceptions raised by the import pipeline.

Row-level problems are never raised; they are counted as rejections.
Only problems that would make every row fail, or that stop the hand-off
to storage, surface as exceptions.
"""


class ProfileConfigurationError(ValueError):
    """
    A bank profile or date-format override cannot be used for import.

    Raised before any row is processed, e.g. a profile with neither an
    amount column nor a complete credit/debit pair, or an unknown date format.
    """


class ImportStorageError(RuntimeError):
    """The storage layer failed while accepting an import batch."""

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message)
        self.filename = filename
