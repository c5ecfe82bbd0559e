"""CurveQualityControl — warning-level diagnostics for a fitted standard curve.

Flags slope sign, efficiency outside the ideal range, low R² and too few
points, and builds a per-point residual table.
No Streamlit dependency — all methods are pure computation.
"""

from typing import List, Optional

import numpy as np
import pandas as pd

from qpcr_titer.constants import AnalysisConstants, CQ_COLUMN, SQ_COLUMN
from qpcr_titer.curve import CurveFitter, FittedCurve


class CurveQualityControl:
    EFFICIENCY_MIN = AnalysisConstants.EFFICIENCY_IDEAL_MIN
    EFFICIENCY_MAX = AnalysisConstants.EFFICIENCY_IDEAL_MAX
    R_SQUARED_THRESHOLD = AnalysisConstants.R_SQUARED_WARNING
    RECOMMENDED_POINTS = AnalysisConstants.RECOMMENDED_STANDARD_POINTS

    @staticmethod
    def assess(fitted_curve: Optional[FittedCurve]) -> List[dict]:
        """One row per metric with a status text and ok/warning severity."""
        if fitted_curve is None:
            return []

        rows = []

        slope = fitted_curve.slope
        if slope >= 0:
            rows.append(
                {"metric": "Slope", "value": slope,
                 "status": "Non-negative slope", "severity": "warning"}
            )
        else:
            rows.append({"metric": "Slope", "value": slope, "status": "OK", "severity": "ok"})

        eff = fitted_curve.efficiency
        if np.isnan(eff):
            rows.append(
                {"metric": "Efficiency", "value": eff,
                 "status": "Undefined", "severity": "warning"}
            )
        elif not (CurveQualityControl.EFFICIENCY_MIN <= eff <= CurveQualityControl.EFFICIENCY_MAX):
            rows.append(
                {"metric": "Efficiency", "value": eff,
                 "status": (
                     f"Outside ideal range ({CurveQualityControl.EFFICIENCY_MIN * 100:.0f}%"
                     f"-{CurveQualityControl.EFFICIENCY_MAX * 100:.0f}%)"
                 ),
                 "severity": "warning"}
            )
        else:
            rows.append({"metric": "Efficiency", "value": eff, "status": "OK", "severity": "ok"})

        r2 = fitted_curve.r_squared
        if r2 < CurveQualityControl.R_SQUARED_THRESHOLD:
            rows.append(
                {"metric": "R²", "value": r2,
                 "status": f"Low R² (< {CurveQualityControl.R_SQUARED_THRESHOLD})",
                 "severity": "warning"}
            )
        else:
            rows.append({"metric": "R²", "value": r2, "status": "OK", "severity": "ok"})

        n = fitted_curve.n_points
        if n < CurveQualityControl.RECOMMENDED_POINTS:
            rows.append(
                {"metric": "Points", "value": n, "status": "Low n", "severity": "warning"}
            )
        else:
            rows.append({"metric": "Points", "value": n, "status": "OK", "severity": "ok"})

        return rows

    @staticmethod
    def get_point_table(dataset, fitted_curve: FittedCurve) -> pd.DataFrame:
        """Observed vs fitted Cq for every standard point."""
        frame = CurveFitter.coerce_dataset(dataset)
        if fitted_curve is None or frame.empty:
            return pd.DataFrame()

        table = frame.copy()
        table["log10_SQ"] = list(fitted_curve.log_sq_values)
        table["Predicted_Cq"] = fitted_curve.predicted_cq(table["log10_SQ"])
        table["Residual"] = table[CQ_COLUMN] - table["Predicted_Cq"]

        table["Predicted_Cq"] = table["Predicted_Cq"].round(4)
        table["Residual"] = table["Residual"].round(4)
        return table[[CQ_COLUMN, SQ_COLUMN, "log10_SQ", "Predicted_Cq", "Residual"]]

    @staticmethod
    def get_summary_stats(fitted_curve: Optional[FittedCurve]) -> dict:
        if fitted_curve is None:
            return {}

        rows = CurveQualityControl.assess(fitted_curve)
        return {
            "n_points": fitted_curve.n_points,
            "slope": round(fitted_curve.slope, 4),
            "intercept": round(fitted_curve.intercept, 4),
            "r_squared": round(fitted_curve.r_squared, 4),
            "efficiency_pct": round(fitted_curve.efficiency_pct, 2),
            "warning_count": sum(1 for r in rows if r["severity"] == "warning"),
            "status": "; ".join(r["status"] for r in rows if r["severity"] != "ok") or "OK",
        }
