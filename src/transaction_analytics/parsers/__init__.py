"""Parsers for extracted transaction records."""

from transaction_analytics.parsers.base import BaseParser, ParseError
from transaction_analytics.parsers.csv_parser import CSVParser
from transaction_analytics.parsers.detector import FileDetector, parse_file
from transaction_analytics.parsers.json_parser import JSONParser

__all__ = [
    "BaseParser",
    "ParseError",
    "CSVParser",
    "JSONParser",
    "FileDetector",
    "parse_file",
]
