"""qPCR Standard Curve & Virus Titer Package.

Provides:
- CurveFitter: Standard curve validation and Cq ~ log10(SQ) regression
- TiterPredictor: SQ prediction from Cq and virus titer conversion
- StandardCurveSession: Editable inputs with eager recompute
- CurveQualityControl: Slope/efficiency/R² diagnostics and residual table
- StandardCurveTable: Cq/SQ table detection in CSV exports
- StandardCurveParser: Standard curve CSV upload parsing for the app
- CurveGraphGenerator: Plotly standard curve chart
- export_to_excel: Multi-sheet Excel export
"""

from qpcr_titer.constants import (
    AnalysisConstants,
    TiterConstants,
    DEFAULT_STANDARD_CURVE,
    DEFAULT_UNKNOWN_CQ,
    DEFAULT_GENOME_LENGTH_BP,
    DEFAULT_DILUTION_FACTOR,
)
from qpcr_titer.errors import (
    QPCRAnalysisError,
    InvalidDataError,
    DegenerateFitError,
    UndefinedPredictionError,
    MissingInputError,
    InvalidParameterError,
)
from qpcr_titer.curve import CurveFitter, FittedCurve, StandardCurvePoint
from qpcr_titer.prediction import TiterPredictor, TiterInputs, TiterResult
from qpcr_titer.session import StandardCurveSession, AnalysisResult, default_dataset
from qpcr_titer.quality_control import CurveQualityControl
from qpcr_titer.table import StandardCurveTable
from qpcr_titer.parser import StandardCurveParser
from qpcr_titer.graph import CurveGraphGenerator
from qpcr_titer.utils import (
    format_scientific,
    format_equation,
    format_regression_report,
    format_predicted_sq,
    format_titer,
    get_session,
    reset_session,
)
from qpcr_titer.export import export_to_excel

__all__ = [
    "AnalysisConstants",
    "TiterConstants",
    "DEFAULT_STANDARD_CURVE",
    "DEFAULT_UNKNOWN_CQ",
    "DEFAULT_GENOME_LENGTH_BP",
    "DEFAULT_DILUTION_FACTOR",
    "QPCRAnalysisError",
    "InvalidDataError",
    "DegenerateFitError",
    "UndefinedPredictionError",
    "MissingInputError",
    "InvalidParameterError",
    "CurveFitter",
    "FittedCurve",
    "StandardCurvePoint",
    "TiterPredictor",
    "TiterInputs",
    "TiterResult",
    "StandardCurveSession",
    "AnalysisResult",
    "default_dataset",
    "CurveQualityControl",
    "StandardCurveTable",
    "StandardCurveParser",
    "CurveGraphGenerator",
    "format_scientific",
    "format_equation",
    "format_regression_report",
    "format_predicted_sq",
    "format_titer",
    "get_session",
    "reset_session",
    "export_to_excel",
]
