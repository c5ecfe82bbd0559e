"""CurveFitter — standard curve validation and linear regression.

Fits Cq against log10(SQ) by ordinary least squares and derives the
amplification efficiency. No Streamlit dependency — all methods are pure
computation.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from qpcr_titer.constants import AnalysisConstants, CQ_COLUMN, SQ_COLUMN
from qpcr_titer.errors import DegenerateFitError, InvalidDataError

logger = logging.getLogger(__name__)


class StandardCurvePoint(NamedTuple):
    cq: float
    sq: float


@dataclass(frozen=True)
class FittedCurve:
    """Result of one standard curve fit. Replaced, never mutated."""

    slope: float
    intercept: float
    r_squared: float
    efficiency: float
    log_sq_values: Tuple[float, ...]
    n_points: int
    warnings: Tuple[str, ...] = ()

    @property
    def efficiency_pct(self) -> float:
        return self.efficiency * 100

    def predicted_cq(self, log_sq):
        return self.slope * np.asarray(log_sq, dtype=float) + self.intercept


class CurveFitter:
    @staticmethod
    def coerce_cell(value) -> float:
        """Convert one edited cell to float; anything non-numeric becomes NaN."""
        if value is None or isinstance(value, bool):
            return np.nan
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return np.nan
        try:
            number = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
        except (TypeError, ValueError):
            return np.nan
        return float(number) if pd.notna(number) else np.nan

    @staticmethod
    def coerce_dataset(data) -> pd.DataFrame:
        """Return a fresh Cq/SQ frame from a DataFrame or a sequence of points.

        Accepts StandardCurvePoint items, (cq, sq) pairs, or dicts with Cq/SQ
        keys. Non-numeric cells become NaN so validate() can report them.
        """
        if data is None:
            raise InvalidDataError("No standard curve data provided.")

        if isinstance(data, pd.DataFrame):
            missing = [c for c in (CQ_COLUMN, SQ_COLUMN) if c not in data.columns]
            if missing:
                raise InvalidDataError(
                    f"Standard curve table is missing column(s): {', '.join(missing)}"
                )
            frame = data[[CQ_COLUMN, SQ_COLUMN]].copy()
        else:
            if isinstance(data, (str, bytes)):
                items = None
            else:
                try:
                    items = list(data)
                except TypeError:
                    items = None
            if items is None:
                raise InvalidDataError(
                    "Standard curve data must be a table or a sequence of (Cq, SQ) "
                    f"points, not {type(data).__name__}."
                )

            rows = []
            for item in items:
                if isinstance(item, dict):
                    rows.append({CQ_COLUMN: item.get(CQ_COLUMN), SQ_COLUMN: item.get(SQ_COLUMN)})
                elif isinstance(item, StandardCurvePoint):
                    rows.append({CQ_COLUMN: item.cq, SQ_COLUMN: item.sq})
                else:
                    try:
                        cq, sq = item
                    except (TypeError, ValueError):
                        raise InvalidDataError(
                            f"Cannot read standard curve point {item!r}; expected (Cq, SQ)."
                        ) from None
                    rows.append({CQ_COLUMN: cq, SQ_COLUMN: sq})
            frame = pd.DataFrame(rows, columns=[CQ_COLUMN, SQ_COLUMN])

        for col in (CQ_COLUMN, SQ_COLUMN):
            try:
                frame[col] = pd.to_numeric(frame[col], errors="coerce").astype(float)
            except (TypeError, ValueError):
                # Container cells (lists, dicts) make to_numeric raise even with coerce
                frame[col] = frame[col].map(CurveFitter.coerce_cell).astype(float)

        return frame.reset_index(drop=True)

    @staticmethod
    def validate(dataset) -> pd.DataFrame:
        """Check the dataset invariants and return it unchanged.

        Raises:
            InvalidDataError: fewer than 2 points, any missing/non-finite
                value, or any SQ <= 0. One bad point invalidates the whole set.
        """
        frame = CurveFitter.coerce_dataset(dataset)

        if len(frame) < AnalysisConstants.MIN_STANDARD_POINTS:
            raise InvalidDataError(
                f"At least {AnalysisConstants.MIN_STANDARD_POINTS} standard points are "
                f"required (got {len(frame)})."
            )

        cq = frame[CQ_COLUMN].to_numpy()
        sq = frame[SQ_COLUMN].to_numpy()

        bad_rows = np.where(~np.isfinite(cq) | ~np.isfinite(sq))[0]
        if len(bad_rows) > 0:
            raise InvalidDataError(
                "Cq and SQ must be finite numbers; check row(s) "
                + ", ".join(str(i + 1) for i in bad_rows)
            )

        non_positive = np.where(sq <= 0)[0]
        if len(non_positive) > 0:
            raise InvalidDataError(
                "SQ values must be greater than 0; check row(s) "
                + ", ".join(str(i + 1) for i in non_positive)
            )

        return dataset

    @staticmethod
    def efficiency_from_slope(slope: float) -> float:
        """Amplification efficiency 10^(-1/slope) - 1, or NaN when undefined."""
        if slope == 0 or not np.isfinite(slope):
            return np.nan
        with np.errstate(over="ignore"):
            efficiency = np.power(10.0, -1.0 / slope) - 1.0
        return float(efficiency) if np.isfinite(efficiency) else np.nan

    @staticmethod
    def fit(dataset) -> FittedCurve:
        """Ordinary least squares of Cq on log10(SQ), intercept included."""
        frame = CurveFitter.validate(CurveFitter.coerce_dataset(dataset))

        cq = frame[CQ_COLUMN].to_numpy(dtype=float)
        log_sq = np.log10(frame[SQ_COLUMN].to_numpy(dtype=float))

        if np.all(log_sq == log_sq[0]):
            raise DegenerateFitError(
                "All SQ values are identical; the standard curve slope is undefined. "
                "Use at least two different starting quantities."
            )

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            result = stats.linregress(log_sq, cq)

        slope = float(result.slope)
        intercept = float(result.intercept)
        r_squared = float(np.clip(result.rvalue ** 2, 0.0, 1.0))
        # Constant Cq: nothing to explain, report 0 rather than 0/0
        if not np.isfinite(r_squared):
            r_squared = 0.0

        if not (np.isfinite(slope) and np.isfinite(intercept)):
            raise DegenerateFitError("Regression produced a non-finite slope or intercept.")

        fit_warnings = []
        if slope >= 0:
            fit_warnings.append(
                f"Slope is non-negative ({slope:.4f}); Cq should decrease as SQ "
                "increases, so the efficiency is not interpretable."
            )

        efficiency = CurveFitter.efficiency_from_slope(slope)
        if np.isnan(efficiency):
            fit_warnings.append("Efficiency is undefined for this slope.")

        for message in fit_warnings:
            logger.warning(message)

        logger.debug(
            "Fitted %d points: slope=%.6f intercept=%.6f r2=%.6f",
            len(cq), slope, intercept, r_squared,
        )

        return FittedCurve(
            slope=slope,
            intercept=intercept,
            r_squared=r_squared,
            efficiency=efficiency,
            log_sq_values=tuple(float(v) for v in log_sq),
            n_points=len(cq),
            warnings=tuple(fit_warnings),
        )
