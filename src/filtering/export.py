"""Export of filtered data together with the filters that produced it."""

import io
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from config import config
from config.logging_config import get_logger

from .fields import FieldDescriptor
from .url_codec import encode
from .values import copy_values, count_active, summarize_filters

logger = get_logger("export")


class FilterExporter:
    """Export filtered records and their active filters to various formats."""

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize exporter.

        Args:
            output_dir: Directory for file exports.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else config.data.exports_path
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_filename(self, module: str, extension: str) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{module}-filtered-data_{timestamp}.{extension}"

    def build_payload(
        self,
        module: str,
        values: Mapping[str, Any],
        df: pd.DataFrame,
    ) -> Dict[str, Any]:
        """
        Build the export document.

        Returns:
            ``{module, filters, data, exported_at, total_records}``.
        """
        # Round-trip through pandas JSON so dates and numpy scalars serialize
        records = json.loads(df.to_json(orient="records", date_format="iso"))
        return {
            "module": module,
            "filters": copy_values(values),
            "data": records,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "total_records": len(df),
        }

    def export_json(
        self,
        module: str,
        values: Mapping[str, Any],
        df: pd.DataFrame,
        filename: Optional[str] = None,
    ) -> Path:
        """
        Export records and filters to a JSON file.

        Returns:
            Path to exported file.
        """
        filepath = self.output_dir / (filename or self.generate_filename(module, "json"))
        payload = self.build_payload(module, values, df)
        filepath.write_text(json.dumps(payload, indent=2), encoding="utf-8")

        logger.info(f"Exported {len(df)} {module} records to {filepath}")
        return filepath

    def export_csv(
        self,
        module: str,
        df: pd.DataFrame,
        filename: Optional[str] = None,
        columns: Optional[List[str]] = None,
    ) -> Path:
        """
        Export records to a CSV file.

        Args:
            module: Module name, used in the generated filename.
            df: Records to export.
            filename: Output filename (generated if None).
            columns: Columns to include (all if None).

        Returns:
            Path to exported file.
        """
        if columns:
            # Only include columns that exist in the DataFrame
            df = df[[c for c in columns if c in df.columns]]

        filepath = self.output_dir / (filename or self.generate_filename(module, "csv"))
        df.to_csv(filepath, index=False, encoding="utf-8")

        logger.info(f"Exported {len(df)} {module} records to {filepath}")
        return filepath

    def _filters_df(
        self,
        fields: Sequence[FieldDescriptor],
        values: Mapping[str, Any],
    ) -> pd.DataFrame:
        rows = []
        labels = {f.id: f.label or f.id for f in fields}
        for key in sorted(values):
            rows.append({
                "Filter": labels.get(key, key),
                "Field": key,
                "Value": json.dumps(values[key]),
            })
        rows.append({"Filter": "Active Filters", "Field": "", "Value": str(count_active(values))})
        rows.append({"Filter": "Summary", "Field": "", "Value": summarize_filters(fields, values)})
        rows.append({"Filter": "Query String", "Field": "", "Value": encode(values)})
        return pd.DataFrame(rows)

    def export_excel_buffer(
        self,
        fields: Sequence[FieldDescriptor],
        values: Mapping[str, Any],
        df: pd.DataFrame,
    ) -> io.BytesIO:
        """
        Export records to an in-memory Excel workbook (for downloads).

        The workbook has a ``Data`` sheet and a ``Filters`` sheet.
        """
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Data", index=False)
            self._format_header(writer.sheets["Data"])
            self._filters_df(fields, values).to_excel(writer, sheet_name="Filters", index=False)
            self._format_header(writer.sheets["Filters"])
        buffer.seek(0)
        return buffer

    def export_excel(
        self,
        module: str,
        fields: Sequence[FieldDescriptor],
        values: Mapping[str, Any],
        df: pd.DataFrame,
        filename: Optional[str] = None,
    ) -> Path:
        """
        Export records and filters to an Excel file.

        Returns:
            Path to exported file.
        """
        filepath = self.output_dir / (filename or self.generate_filename(module, "xlsx"))
        filepath.write_bytes(self.export_excel_buffer(fields, values, df).getvalue())

        logger.info(f"Exported {len(df)} {module} records to Excel: {filepath}")
        return filepath

    def _format_header(self, worksheet) -> None:
        """Bold header row, frozen, with auto-filter."""
        from openpyxl.styles import Font, PatternFill

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="1F2A44", end_color="1F2A44", fill_type="solid")

        for cell in worksheet[1]:
            cell.font = header_font
            cell.fill = header_fill

        worksheet.freeze_panes = "A2"
        worksheet.auto_filter.ref = worksheet.dimensions
