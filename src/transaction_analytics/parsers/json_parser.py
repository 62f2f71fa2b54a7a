"""Parser for JSON files produced by the document extractor."""

import json
from collections.abc import Mapping
from pathlib import Path

from transaction_analytics.parsers.base import BaseParser, ParseError


class JSONParser(BaseParser):
    """Reads extractor output saved as JSON.

    Accepted layouts:
    - a top-level array of records
    - an object with a ``transactions`` array
    """

    @property
    def supported_extensions(self) -> list[str]:
        return [".json"]

    def read_records(self, file_path: Path) -> list[Mapping[str, object]]:
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ParseError(f"{file_path.name}: invalid JSON: {e}", file_path) from e

        if isinstance(data, dict):
            if "transactions" not in data:
                raise ParseError(
                    f"{file_path.name}: expected a 'transactions' array", file_path
                )
            data = data["transactions"]

        if not isinstance(data, list):
            raise ParseError(
                f"{file_path.name}: expected an array of records, got {type(data).__name__}",
                file_path,
            )
        return data
