"""StandardCurveParser — standard curve CSV upload parsing for the Streamlit app.

Reads the upload through StandardCurveTable (Cq/Ct/Cт and SQ/Quantity column
detection, encoding fallback) and reports problems to the user with st.*
messages instead of raising.
"""

import streamlit as st

from qpcr_titer.errors import InvalidDataError
from qpcr_titer.table import StandardCurveTable


class StandardCurveParser:
    MAX_FILE_SIZE_MB = 50

    @staticmethod
    def parse_table(df, start):
        try:
            result = StandardCurveTable.extract(df, start)
        except InvalidDataError as e:
            st.error(f"Standard curve parsing failed: {e}")
            return None

        invalid_count = int(result.isna().any(axis=1).sum())
        if invalid_count > 0:
            st.info(
                f"Note: {invalid_count} rows have missing or non-numeric Cq/SQ values. "
                "Fix them in the table before fitting."
            )

        if result.empty:
            st.warning("No standard curve rows found. Check the Cq and SQ columns.")

        return result

    @staticmethod
    def parse(file):
        try:
            file.seek(0, 2)
            file_size_mb = file.tell() / (1024 * 1024)
            file.seek(0)

            if file_size_mb > StandardCurveParser.MAX_FILE_SIZE_MB:
                st.error(
                    f"File too large ({file_size_mb:.1f} MB). Maximum size is "
                    f"{StandardCurveParser.MAX_FILE_SIZE_MB} MB."
                )
                return None

            df = StandardCurveTable.read_raw(file)

            start = StandardCurveTable.find_header_row(df)
            if start is None:
                st.error("Could not find Cq and SQ columns in the uploaded file.")
                return None
            return StandardCurveParser.parse_table(df, start)
        except Exception as e:
            st.error(f"Parse error: {e}")
            return None
