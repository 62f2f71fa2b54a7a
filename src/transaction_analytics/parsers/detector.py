"""Input file discovery and parser selection."""

from pathlib import Path
from typing import Optional

from transaction_analytics.models.transaction import Transaction
from transaction_analytics.parsers.base import BaseParser, ParseError
from transaction_analytics.parsers.csv_parser import CSVParser
from transaction_analytics.parsers.json_parser import JSONParser
from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


class FileDetector:
    """Chooses a parser for each input file by extension."""

    def __init__(self, parsers: Optional[list[BaseParser]] = None):
        """Initialize file detector.

        Args:
            parsers: Parsers to try in order (default: JSON, CSV).
        """
        self.parsers = parsers if parsers is not None else [JSONParser(), CSVParser()]

    @property
    def supported_extensions(self) -> set[str]:
        return {ext for parser in self.parsers for ext in parser.supported_extensions}

    def detect_parser(self, file_path: Path) -> Optional[BaseParser]:
        """Return the first parser that accepts the file, or None."""
        for parser in self.parsers:
            if parser.can_parse(file_path):
                return parser
        return None

    def discover_files(self, path: Path) -> list[Path]:
        """List supported files.

        A file path is returned as is; a directory is scanned (not
        recursively, hidden files skipped) and sorted by name so that chunks
        arrive in a stable order.

        Args:
            path: File or directory.

        Returns:
            Supported files.
        """
        if path.is_file():
            return [path]

        files = sorted(
            p for p in path.iterdir()
            if p.is_file()
            and not p.name.startswith(".")
            and p.suffix.lower() in self.supported_extensions
        )
        logger.debug(f"Discovered {len(files)} files in {path}")
        return files

    def parse_file(self, file_path: Path) -> list[Transaction]:
        """Parse one file with the matching parser.

        Raises:
            ParseError: If no parser supports the file or parsing fails.
        """
        parser = self.detect_parser(file_path)
        if parser is None:
            raise ParseError(f"Unsupported file type: {file_path.name}", file_path)
        logger.debug(f"Parsing {file_path.name} with {parser.name}")
        return parser.parse(file_path)


def parse_file(file_path: Path) -> list[Transaction]:
    """Convenience function to parse a single file."""
    return FileDetector().parse_file(file_path)
