"""StandardCurveSession — host-owned inputs with eager recompute.

The session owns the editable standard curve table and the three scalar
inputs. Every mutation triggers a full recompute, so ``result`` always
matches the current inputs.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import pandas as pd

from qpcr_titer.constants import (
    CQ_COLUMN,
    DEFAULT_DILUTION_FACTOR,
    DEFAULT_GENOME_LENGTH_BP,
    DEFAULT_STANDARD_CURVE,
    DEFAULT_UNKNOWN_CQ,
    SQ_COLUMN,
)
from qpcr_titer.curve import CurveFitter, FittedCurve
from qpcr_titer.errors import InvalidDataError, QPCRAnalysisError
from qpcr_titer.prediction import TiterInputs, TiterPredictor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    fitted_curve: Optional[FittedCurve] = None
    curve_error: Optional[QPCRAnalysisError] = None
    predicted_sq: Optional[float] = None
    prediction_error: Optional[QPCRAnalysisError] = None
    titer: Optional[float] = None
    titer_error: Optional[QPCRAnalysisError] = None

    @property
    def ok(self) -> bool:
        return self.titer is not None


def default_dataset() -> pd.DataFrame:
    return pd.DataFrame(DEFAULT_STANDARD_CURVE, columns=[CQ_COLUMN, SQ_COLUMN]).astype(float)


class StandardCurveSession:
    def __init__(
        self,
        dataset=None,
        unknown_cq: Optional[float] = DEFAULT_UNKNOWN_CQ,
        genome_length_bp: Optional[float] = DEFAULT_GENOME_LENGTH_BP,
        dilution_factor: Optional[float] = DEFAULT_DILUTION_FACTOR,
    ):
        self._dataset = (
            default_dataset() if dataset is None else self._table_from(dataset)
        )
        self.unknown_cq = unknown_cq
        self.genome_length_bp = genome_length_bp
        self.dilution_factor = dilution_factor
        self.result = AnalysisResult()
        self.recompute()

    @staticmethod
    def _table_from(data) -> pd.DataFrame:
        return CurveFitter.coerce_dataset(data)

    @property
    def dataset(self) -> pd.DataFrame:
        return self.snapshot()

    @property
    def titer_inputs(self) -> TiterInputs:
        return TiterInputs(self.unknown_cq, self.genome_length_bp, self.dilution_factor)

    def snapshot(self) -> pd.DataFrame:
        """Copy of the table handed to the engine for one analysis pass."""
        return self._dataset.copy()

    # ---------- mutators: each one recomputes ----------
    def edit_cell(self, row: int, column: Union[int, str], value) -> AnalysisResult:
        """Apply one cell edit; non-numeric input is stored as NaN."""
        if isinstance(column, str):
            if column not in (CQ_COLUMN, SQ_COLUMN):
                raise InvalidDataError(f"Unknown standard curve column '{column}'.")
            col_name = column
        else:
            if column not in (0, 1):
                raise InvalidDataError(f"Column index {column} is out of range (0-1).")
            col_name = (CQ_COLUMN, SQ_COLUMN)[column]

        if not 0 <= row < len(self._dataset):
            raise InvalidDataError(
                f"Row {row} is out of range (table has {len(self._dataset)} rows)."
            )

        self._dataset.loc[row, col_name] = CurveFitter.coerce_cell(value)
        return self.recompute()

    def set_dataset(self, data) -> AnalysisResult:
        self._dataset = self._table_from(data)
        return self.recompute()

    def add_point(self, cq=np.nan, sq=np.nan) -> AnalysisResult:
        new_row = pd.DataFrame(
            {CQ_COLUMN: [CurveFitter.coerce_cell(cq)],
             SQ_COLUMN: [CurveFitter.coerce_cell(sq)]}
        )
        self._dataset = pd.concat([self._dataset, new_row], ignore_index=True)
        return self.recompute()

    def remove_point(self, row: int) -> AnalysisResult:
        if not 0 <= row < len(self._dataset):
            raise InvalidDataError(
                f"Row {row} is out of range (table has {len(self._dataset)} rows)."
            )
        self._dataset = self._dataset.drop(index=row).reset_index(drop=True)
        return self.recompute()

    def set_unknown_cq(self, value) -> AnalysisResult:
        self.unknown_cq = value
        return self.recompute()

    def set_genome_length(self, value) -> AnalysisResult:
        self.genome_length_bp = value
        return self.recompute()

    def set_dilution_factor(self, value) -> AnalysisResult:
        self.dilution_factor = value
        return self.recompute()

    # ---------- recompute ----------
    def recompute(self) -> AnalysisResult:
        """Run fit -> predict -> titer from scratch on the current inputs.

        A failing stage withholds its value and every later stage carries
        the upstream error, so no stale number survives an input change.
        """
        try:
            fitted = CurveFitter.fit(self.snapshot())
        except QPCRAnalysisError as e:
            logger.info("Standard curve not fitted: %s", e)
            self.result = AnalysisResult(
                curve_error=e, prediction_error=e, titer_error=e
            )
            return self.result

        try:
            predicted_sq = TiterPredictor.predict_sq(fitted, self.unknown_cq)
        except QPCRAnalysisError as e:
            logger.info("SQ not predicted: %s", e)
            self.result = AnalysisResult(
                fitted_curve=fitted, prediction_error=e, titer_error=e
            )
            return self.result

        try:
            titer = TiterPredictor.compute_titer(
                predicted_sq, self.genome_length_bp, self.dilution_factor
            )
        except QPCRAnalysisError as e:
            logger.info("Titer not computed: %s", e)
            self.result = AnalysisResult(
                fitted_curve=fitted, predicted_sq=predicted_sq, titer_error=e
            )
            return self.result

        self.result = AnalysisResult(
            fitted_curve=fitted, predicted_sq=predicted_sq, titer=titer
        )
        return self.result
