"""StandardCurveTable — locate and extract the Cq/SQ table from a CSV export.

Instrument exports put a run preamble above the data, so the header row is
searched for instead of assumed to be the first line. No Streamlit
dependency; the upload parser and the command line both read through here.
"""

import pandas as pd

from qpcr_titer.constants import (
    CQ_COLUMN,
    CQ_COLUMN_ALIASES,
    SQ_COLUMN,
    SQ_COLUMN_ALIASES,
)
from qpcr_titer.errors import InvalidDataError


class StandardCurveTable:
    ENCODINGS = ["utf-8", "utf-16", "utf-16-le", "latin-1", "cp1252"]

    @staticmethod
    def detect_columns(columns):
        """Return (cq_col, sq_col) from a header row; either may be None."""
        normalized = {c: str(c).strip().upper() for c in columns if pd.notna(c)}
        cq_col = next((c for c, n in normalized.items() if n in CQ_COLUMN_ALIASES), None)
        sq_col = next((c for c, n in normalized.items() if n in SQ_COLUMN_ALIASES), None)
        return cq_col, sq_col

    @staticmethod
    def find_header_row(df):
        for idx, row in df.iterrows():
            if len(row) == 0 or row.isna().all():
                continue
            cq_col, sq_col = StandardCurveTable.detect_columns(row.values)
            if cq_col is not None and sq_col is not None:
                return idx
        return None

    @staticmethod
    def extract(df, start) -> pd.DataFrame:
        """Cq/SQ frame from the rows under the header at `start`.

        Rows blank in both columns are dropped; rows with one bad cell are
        kept as NaN so validation can name them.
        """
        df = df.iloc[start:].reset_index(drop=True)
        df.columns = [str(c).strip() if pd.notna(c) else c for c in df.iloc[0]]
        df = df.iloc[1:].reset_index(drop=True)

        cq_col, sq_col = StandardCurveTable.detect_columns(df.columns)
        if cq_col is None or sq_col is None:
            missing = []
            if cq_col is None:
                missing.append("Cq/Ct")
            if sq_col is None:
                missing.append("SQ/Quantity")
            raise InvalidDataError(f"Missing columns: {', '.join(missing)}")

        parsed = pd.DataFrame(
            {
                CQ_COLUMN: pd.to_numeric(df[cq_col], errors="coerce"),
                SQ_COLUMN: pd.to_numeric(df[sq_col], errors="coerce"),
            }
        )

        # Rows with nothing in either column are layout padding, not data
        blank = parsed[CQ_COLUMN].isna() & parsed[SQ_COLUMN].isna()
        return parsed[~blank].reset_index(drop=True)

    @staticmethod
    def read_raw(source) -> pd.DataFrame:
        """Read a CSV path or file object without assuming a header row.

        Raises:
            InvalidDataError: the file is missing, empty, malformed, or in
                none of the supported encodings.
        """
        for enc in StandardCurveTable.ENCODINGS:
            try:
                return pd.read_csv(source, encoding=enc, header=None, skip_blank_lines=False)
            except UnicodeError:
                if hasattr(source, "seek"):
                    source.seek(0)
                continue
            except pd.errors.EmptyDataError:
                raise InvalidDataError("Standard curve file is empty.") from None
            except (OSError, pd.errors.ParserError) as e:
                raise InvalidDataError(f"Cannot read standard curve file: {e}") from e
        raise InvalidDataError("Standard curve file is not in a supported text encoding.")

    @staticmethod
    def read(source) -> pd.DataFrame:
        """Read a CSV export and return its Cq/SQ table."""
        raw = StandardCurveTable.read_raw(source)
        start = StandardCurveTable.find_header_row(raw)
        if start is None:
            raise InvalidDataError("Could not find Cq and SQ columns in the file.")
        return StandardCurveTable.extract(raw, start)
