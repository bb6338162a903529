"""
Loading of transaction exports from JSON and CSV files.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from business_day_calculator.data.schemas import Transaction

logger = logging.getLogger(__name__)


class TransactionLoader:
    """Loads transactions exported from the POS backend."""

    SUPPORTED_EXTENSIONS = (".json", ".csv")

    def __init__(self, timezone: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            timezone: IANA timezone of the venue. Timestamps with a UTC
                offset, such as the "...Z" instants of the POS API, are
                converted to wall-clock time in this zone (system local
                time if unset).
        """
        self.timezone = timezone

    def load(self, path: str) -> List[Transaction]:
        """
        Load transactions from a file.

        Args:
            path: Path to a .json or .csv file. JSON files hold a list of
                transaction objects (or an object with a "transactions"
                list); CSV files need a header row. Keys may be snake_case
                or the camelCase used by the POS API.

        Returns:
            List of Transaction objects in file order, with naive
            wall-clock created_at values.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file type is unsupported or a row is invalid.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Transaction file not found: {path}")

        suffix = file_path.suffix.lower()
        if suffix == ".json":
            rows = self._read_json(file_path)
        elif suffix == ".csv":
            rows = self._read_csv(file_path)
        else:
            raise ValueError(
                f"Unsupported file type: {suffix}. Use one of: {', '.join(self.SUPPORTED_EXTENSIONS)}"
            )

        transactions = [self._parse_row(row, index) for index, row in enumerate(rows, start=1)]
        logger.debug(f"Loaded {len(transactions)} transactions from {file_path}")
        return transactions

    def _read_json(self, file_path: Path) -> List[Dict[str, Any]]:
        """Read rows from a JSON file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing JSON file: {e}")

        if isinstance(data, dict):
            data = data.get("transactions", [])
        if not isinstance(data, list):
            raise ValueError("JSON file must contain a list of transactions")
        return data

    def _read_csv(self, file_path: Path) -> List[Dict[str, Any]]:
        """Read rows from a CSV file, dropping empty cells."""
        with open(file_path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            return [
                {key.strip(): value for key, value in row.items() if key and value not in (None, "")}
                for row in reader
            ]

    def _parse_row(self, row: Dict[str, Any], index: int) -> Transaction:
        """Validate a single row into a Transaction."""
        try:
            transaction = Transaction.model_validate(row)
        except ValidationError as e:
            raise ValueError(f"Invalid transaction in row {index}: {e}")
        return transaction.localized(self.timezone)
