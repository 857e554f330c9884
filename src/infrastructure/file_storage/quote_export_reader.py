"""
Quote Export Reader

Reads historical quote exports (CSV or Excel) using Polars.

Responsibility:
    - Load `.csv` / `.xlsx` exports of the shipping_quotes table
    - Normalize header names (trimmed, lowercased, spaces -> underscores)
    - Convert each row into a QuoteRecord, skipping unreadable rows

Architecture Notes:
    - Infrastructure Layer (depends on Polars library)
    - Used by scripts/evaluate_pricing.py and the bulk import path
    - Every column is read as text; QuoteRecord validators do the parsing
"""

import logging
from pathlib import Path
from typing import Union

import polars as pl
from pydantic import ValidationError

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.shared.exceptions import UnsupportedExportFormatError

logger = logging.getLogger(__name__)


class QuoteExportReader:
    """
    Reader turning quote exports into QuoteRecord entities.

    Supported formats:
        - .csv (UTF-8, header row)
        - .xlsx (first sheet, openpyxl engine)

    Examples:
        >>> reader = QuoteExportReader()
        >>> quotes = reader.read(Path("exports/shipping_quotes.csv"))
        >>> print(f"Loaded {len(quotes)} quotes")
    """

    SUPPORTED_EXTENSIONS: tuple[str, ...] = (".csv", ".xlsx")

    def read(self, file_path: Union[str, Path]) -> list[QuoteRecord]:
        """
        Read all quotes of an export.

        Rows without a usable quote_id (or otherwise invalid) are logged and
        skipped.

        Args:
            file_path: Path to the export

        Returns:
            QuoteRecords in file order

        Raises:
            UnsupportedExportFormatError: If the extension is not supported
            FileNotFoundError: If the file does not exist
        """
        path = Path(file_path)
        extension = path.suffix.lower()
        if extension not in self.SUPPORTED_EXTENSIONS:
            raise UnsupportedExportFormatError(
                str(path), list(self.SUPPORTED_EXTENSIONS)
            )
        if not path.exists():
            raise FileNotFoundError(f"Export not found: {path}")

        dataframe = self._load_dataframe(path, extension)
        dataframe = dataframe.rename(
            {name: self._normalize_column(name) for name in dataframe.columns}
        )

        records: list[QuoteRecord] = []
        skipped = 0
        for row_number, row in enumerate(dataframe.iter_rows(named=True), start=2):
            try:
                records.append(QuoteRecord.from_row(row))
            except ValidationError as e:
                skipped += 1
                logger.warning(f"Skipping row {row_number} of {path.name}: {e}")

        logger.info(
            f"Read {len(records)} quote(s) from {path.name}"
            + (f" ({skipped} skipped)" if skipped else "")
        )
        return records

    def _load_dataframe(self, path: Path, extension: str) -> pl.DataFrame:
        if extension == ".csv":
            return pl.read_csv(path, infer_schema=False)
        return pl.read_excel(source=path, engine="openpyxl")

    @staticmethod
    def _normalize_column(name: str) -> str:
        """
        Examples:
            >>> QuoteExportReader._normalize_column(" Origin City ")
            'origin_city'
        """
        return name.strip().lower().replace(" ", "_")
