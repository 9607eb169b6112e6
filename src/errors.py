from typing import Optional


class PaymentsError(Exception):
    """Base class for failures that abort a processing run."""


class RecordParseError(PaymentsError):
    """The input stream is malformed and cannot be read any further."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class LedgerStateError(PaymentsError):
    """Internal state is inconsistent, e.g. an account vanished after being looked up."""


class ConfigError(PaymentsError):
    """Raised when engine configuration cannot be parsed."""
