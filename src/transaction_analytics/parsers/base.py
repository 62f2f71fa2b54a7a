"""Abstract base class for extracted-record parsers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from transaction_analytics.models.transaction import InvalidTransactionError, Transaction
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


class ParseError(Exception):
    """Exception raised when an input file cannot be read as records."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(message)


class BaseParser(ABC):
    """Abstract base class for parsers of extractor output files.

    Subclasses must implement:
    - supported_extensions: File extensions this parser handles
    - read_records(): Read raw record mappings from a file
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return list of file extensions this parser supports."""
        pass

    @property
    def name(self) -> str:
        """Return parser name for logging."""
        return self.__class__.__name__

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check.

        Returns:
            True if the extension is supported.
        """
        return file_path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def read_records(self, file_path: Path) -> list[Mapping[str, object]]:
        """Read raw record mappings from a file.

        Args:
            file_path: Path to the file.

        Returns:
            One mapping per record, in file order.

        Raises:
            ParseError: If the file is not in the expected format.
        """
        pass

    def parse(self, file_path: Path) -> list[Transaction]:
        """Parse a file into transactions.

        Args:
            file_path: Path to the file to parse.

        Returns:
            Transactions in file order.

        Raises:
            ParseError: If the file or any record in it is invalid.
            FileNotFoundError: If file doesn't exist.
        """
        if not file_path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")

        records = self.read_records(file_path)
        transactions: list[Transaction] = []
        for index, record in enumerate(records):
            try:
                transactions.append(self._to_transaction(record, index))
            except InvalidTransactionError as e:
                raise ParseError(f"{file_path.name}: {e}", file_path) from e

        logger.info(f"{self.name} read {len(transactions)} transactions from {file_path.name}")
        return transactions

    def _to_transaction(self, record: Mapping[str, object], index: int) -> Transaction:
        """Convert one raw record. Override to pre-process field values."""
        return Transaction.from_dict(record, index=index)
