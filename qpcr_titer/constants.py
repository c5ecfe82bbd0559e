"""Constants and configuration for standard curve and titer analysis.

Contains protocol constants for the titer formula, seed data, QC thresholds,
and plot colors.
"""

# ==================== COLOR CONSTANTS ====================
POINT_COLOR = "#1F4FD8"
FIT_LINE_COLOR = "#EA1D22"
PLOTLY_FONT_FAMILY = "Arial, sans-serif"

# ==================== DEFAULT INPUTS ====================
DEFAULT_STANDARD_CURVE = {
    "Cq": [22.9, 20.51, 17.8, 16.1],
    "SQ": [0.00001, 0.01, 0.1, 1.0],
}
DEFAULT_UNKNOWN_CQ = 20.0
DEFAULT_GENOME_LENGTH_BP = 33000.0
DEFAULT_DILUTION_FACTOR = 400.0

CQ_COLUMN = "Cq"
SQ_COLUMN = "SQ"

# Accepted header spellings when a standard curve is uploaded as CSV
CQ_COLUMN_ALIASES = ["CQ", "CT", "C\u0422", "CQ VALUE", "CT VALUE"]
SQ_COLUMN_ALIASES = ["SQ", "QUANTITY", "STARTING QUANTITY", "STARTING QUANTITY (SQ)"]


# ==================== TITER CONSTANTS ====================
class TiterConstants:
    NANO_TO_BASE = 1e-9
    AVOGADRO = 6.022e23
    BP_MOLAR_MASS = 650.0
    TITER_UNIT = "genomic copies/mL"


# ==================== ANALYSIS CONSTANTS ====================
class AnalysisConstants:
    MIN_STANDARD_POINTS = 2
    RECOMMENDED_STANDARD_POINTS = 3
    EFFICIENCY_IDEAL_MIN = 0.90
    EFFICIENCY_IDEAL_MAX = 1.10
    R_SQUARED_WARNING = 0.98
    DISPLAY_DIGITS = 4
    EFFICIENCY_DECIMALS = 2
