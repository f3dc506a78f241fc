"""Loading payslip and adjustment records from JSON or CSV files."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from .models import PayslipEntry, PIAWEAdjustment

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv")


class RecordLoader:
    """Reads worker pay history for a calculation.

    JSON files hold either a list of payslips or an object with ``payslips``
    and optional ``adjustments`` lists. CSV files hold one payslip per row.
    Field names may be snake_case or camelCase.
    """

    def _check_file(self, file_path: Path) -> str:
        if not file_path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")

        extension = file_path.suffix.lower().lstrip('.')
        if extension not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported input format '{extension}' for {file_path}; "
                f"expected one of {', '.join(SUPPORTED_FORMATS)}"
            )
        return extension

    def _read_csv_rows(self, file_path: Path) -> List[Dict[str, Any]]:
        with open(file_path, newline='') as f:
            # Blank cells fall back to model defaults
            return [
                {
                    key.strip(): value.strip()
                    for key, value in row.items()
                    if key and isinstance(value, str) and value.strip()
                }
                for row in csv.DictReader(f)
            ]

    def load_payslips(self, path: Union[str, Path]) -> List[PayslipEntry]:
        payslips, _ = self.load(path)
        return payslips

    def load_adjustments(self, path: Union[str, Path]) -> List[PIAWEAdjustment]:
        """Load adjustments from a JSON list or a JSON object's ``adjustments`` key."""
        file_path = Path(path)
        extension = self._check_file(file_path)

        if extension == "csv":
            records = self._read_csv_rows(file_path)
        else:
            data = json.loads(file_path.read_text())
            records = data.get("adjustments", []) if isinstance(data, dict) else data

        adjustments = [PIAWEAdjustment.model_validate(r) for r in records]
        logger.info(f"Loaded {len(adjustments)} adjustments from {file_path}")
        return adjustments

    def load(self, path: Union[str, Path]) -> Tuple[List[PayslipEntry], List[PIAWEAdjustment]]:
        """Load payslips and any embedded adjustments.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the format is unsupported or a record is invalid.
        """
        file_path = Path(path)
        extension = self._check_file(file_path)

        adjustment_records: List[Dict[str, Any]] = []
        if extension == "csv":
            payslip_records = self._read_csv_rows(file_path)
        else:
            data = json.loads(file_path.read_text())
            if isinstance(data, dict):
                payslip_records = data.get("payslips", [])
                adjustment_records = data.get("adjustments", [])
            else:
                payslip_records = data

        payslips = [PayslipEntry.model_validate(r) for r in payslip_records]
        adjustments = [PIAWEAdjustment.model_validate(r) for r in adjustment_records]

        logger.info(
            f"Loaded {len(payslips)} payslips and {len(adjustments)} adjustments from {file_path}"
        )
        return payslips, adjustments
