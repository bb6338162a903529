"""
Export functionality for business day reports.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from business_day_calculator.data.schemas import BusinessDayRange, BusinessDaySummary


class ResultExporter:
    """Exports business day reports to various formats."""

    def __init__(
        self,
        output_directory: str = "results",
        timestamp_format: str = "%Y%m%d_%H%M%S",
    ):
        """
        Initialize the result exporter.

        Args:
            output_directory: Directory for output files.
            timestamp_format: Format string for timestamps in filenames.
        """
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format

    def _ensure_output_dir(self) -> Path:
        """Ensure output directory exists and return path."""
        output_path = Path(self.output_directory)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path

    def _generate_filename(self, prefix: str, extension: str) -> str:
        """Generate a filename with timestamp."""
        timestamp = datetime.now().strftime(self.timestamp_format)
        return f"{prefix}_{timestamp}.{extension}"

    def _resolve_path(self, prefix: str, extension: str, output_path: Optional[str]) -> Path:
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            return file_path
        return self._ensure_output_dir() / self._generate_filename(prefix, extension)

    def export_json(
        self, summaries: List[BusinessDaySummary], output_path: Optional[str] = None
    ) -> str:
        """
        Export per-business-day summaries to a JSON file.

        Args:
            summaries: Summaries to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path("business_days", "json", output_path)

        payload = {
            "generated_at": datetime.now().isoformat(),
            "business_days": [s.model_dump(mode="json") for s in summaries],
        }

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

        return str(file_path)

    def export_csv(
        self, summaries: List[BusinessDaySummary], output_path: Optional[str] = None
    ) -> str:
        """
        Export per-business-day summaries to a CSV file, one row per day.

        Args:
            summaries: Summaries to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path("business_days", "csv", output_path)

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)

            # Write header
            writer.writerow([
                "Business Day",
                "Start",
                "End",
                "Transactions",
                "Total Sales",
                "Total Tax",
                "Total Tips",
            ])

            # Write data
            for day in summaries:
                writer.writerow([
                    day.business_day.isoformat(),
                    day.window.start.isoformat(),
                    day.window.end.isoformat(),
                    day.summary.transactions,
                    f"{day.summary.total_sales:.2f}",
                    f"{day.summary.total_tax:.2f}",
                    f"{day.summary.total_tips:.2f}",
                ])

        return str(file_path)

    def export_ranges_csv(
        self, ranges: List[BusinessDayRange], output_path: Optional[str] = None
    ) -> str:
        """
        Export business day ranges to a CSV file.

        Args:
            ranges: Ranges to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path("ranges", "csv", output_path)

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Start", "End"])
            for business_day in ranges:
                writer.writerow([business_day.start.isoformat(), business_day.end.isoformat()])

        return str(file_path)

    def export_both(
        self, summaries: List[BusinessDaySummary], output_path: Optional[str] = None
    ) -> Tuple[str, str]:
        """
        Export summaries to both JSON and CSV.

        Args:
            summaries: Summaries to export.
            output_path: Optional path; its extension is replaced by .json
                and .csv for the two files.

        Returns:
            Tuple of (json_path, csv_path).
        """
        json_output = csv_output = None
        if output_path:
            base = Path(output_path)
            json_output = str(base.with_suffix(".json"))
            csv_output = str(base.with_suffix(".csv"))

        json_path = self.export_json(summaries, json_output)
        csv_path = self.export_csv(summaries, csv_output)
        return json_path, csv_path
