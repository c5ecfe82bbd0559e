"""TiterPredictor — SQ prediction from Cq and virus titer conversion.

Inverts the fitted standard curve to predict the starting quantity of an
unknown sample, then converts it into genomic copies/mL.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from qpcr_titer.constants import TiterConstants
from qpcr_titer.curve import FittedCurve
from qpcr_titer.errors import (
    InvalidParameterError,
    MissingInputError,
    UndefinedPredictionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TiterInputs:
    unknown_cq: Optional[float]
    genome_length_bp: Optional[float]
    dilution_factor: Optional[float]


@dataclass(frozen=True)
class TiterResult:
    predicted_sq: float
    titer: float


def _require_number(name: str, value, positive: bool = False) -> float:
    if value is None:
        raise MissingInputError(f"{name} is required.")
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}.") from None
    if not np.isfinite(number):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}.")
    if positive and number <= 0:
        raise InvalidParameterError(f"{name} must be greater than 0, got {value!r}.")
    return number


class TiterPredictor:
    @staticmethod
    def predict_sq(fitted_curve: FittedCurve, unknown_cq) -> float:
        """Predict SQ = 10^((Cq - intercept) / slope).

        Extrapolation beyond the standard range is allowed.

        Raises:
            UndefinedPredictionError: no usable curve or a zero slope.
            MissingInputError: unknown_cq is None.
            InvalidParameterError: unknown_cq is non-numeric or non-finite.
        """
        if not isinstance(fitted_curve, FittedCurve):
            raise UndefinedPredictionError(
                "No valid standard curve; fix the standard curve data first."
            )
        if not (np.isfinite(fitted_curve.slope) and np.isfinite(fitted_curve.intercept)):
            raise UndefinedPredictionError("Standard curve slope or intercept is not finite.")
        if fitted_curve.slope == 0:
            raise UndefinedPredictionError(
                "Standard curve slope is 0; SQ cannot be predicted from Cq."
            )

        cq = _require_number("Cq value", unknown_cq)

        log_sq = (cq - fitted_curve.intercept) / fitted_curve.slope
        with np.errstate(over="ignore", under="ignore"):
            sq = float(np.power(10.0, log_sq))

        if not np.isfinite(sq) or sq <= 0:
            raise UndefinedPredictionError(
                f"Predicted SQ for Cq {cq} is outside the representable range "
                f"(log10 SQ = {log_sq:.4g})."
            )

        logger.debug("Predicted SQ %.6g for Cq %.4f", sq, cq)
        return sq

    @staticmethod
    def compute_titer(predicted_sq, genome_length_bp, dilution_factor) -> float:
        """Titer = (SQ * 1e-9 * 6.022e23 * dilution) / (length * 650), in genomic copies/mL.

        Raises:
            MissingInputError: any input is None.
            InvalidParameterError: any input is non-positive or non-finite.
        """
        sq = _require_number("Predicted SQ", predicted_sq, positive=True)
        length = _require_number("Genome length (bp)", genome_length_bp, positive=True)
        dilution = _require_number("Dilution factor", dilution_factor, positive=True)

        titer = (
            sq * TiterConstants.NANO_TO_BASE * TiterConstants.AVOGADRO * dilution
        ) / (length * TiterConstants.BP_MOLAR_MASS)

        if not np.isfinite(titer) or titer <= 0:
            raise InvalidParameterError(f"Titer is not representable for SQ {sq:.4g}.")

        logger.debug("Titer %.6g %s", titer, TiterConstants.TITER_UNIT)
        return titer

    @staticmethod
    def predict_titer(fitted_curve: FittedCurve, inputs: TiterInputs) -> TiterResult:
        predicted_sq = TiterPredictor.predict_sq(fitted_curve, inputs.unknown_cq)
        titer = TiterPredictor.compute_titer(
            predicted_sq, inputs.genome_length_bp, inputs.dilution_factor
        )
        return TiterResult(predicted_sq=predicted_sq, titer=titer)
