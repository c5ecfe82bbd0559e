"""Export functions for standard curve analysis results.

Provides multi-sheet Excel export with the standard curve table, regression
metrics, titer calculation and QC report.
"""

import io

import pandas as pd

from qpcr_titer.constants import TiterConstants
from qpcr_titer.curve import FittedCurve
from qpcr_titer.prediction import TiterInputs, TiterResult
from qpcr_titer.quality_control import CurveQualityControl
from qpcr_titer.utils import format_equation


def export_to_excel(
    dataset,
    fitted_curve: FittedCurve,
    titer_inputs: TiterInputs = None,
    titer_result: TiterResult = None,
) -> bytes:
    """Export the standard curve analysis as an xlsx workbook.

    Args:
        dataset: Standard curve table (Cq, SQ).
        fitted_curve: Fit computed from that table.
        titer_inputs: Optional unknown Cq, genome length and dilution factor.
        titer_result: Optional predicted SQ and titer for those inputs.
    """
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        CurveQualityControl.get_point_table(dataset, fitted_curve).to_excel(
            writer, sheet_name="Standard_Curve", index=False
        )

        pd.DataFrame(
            [
                {"Metric": "Equation", "Value": format_equation(fitted_curve)},
                {"Metric": "Slope", "Value": fitted_curve.slope},
                {"Metric": "Intercept", "Value": fitted_curve.intercept},
                {"Metric": "R_squared", "Value": fitted_curve.r_squared},
                {"Metric": "Efficiency_pct", "Value": fitted_curve.efficiency_pct},
                {"Metric": "Points", "Value": fitted_curve.n_points},
            ]
        ).to_excel(writer, sheet_name="Regression", index=False)

        if titer_inputs is not None:
            titer_rows = [
                {"Parameter": "Unknown Cq", "Value": titer_inputs.unknown_cq},
                {"Parameter": "Genome length (bp)", "Value": titer_inputs.genome_length_bp},
                {"Parameter": "Dilution factor", "Value": titer_inputs.dilution_factor},
            ]
            if titer_result is not None:
                titer_rows.append({"Parameter": "Predicted SQ", "Value": titer_result.predicted_sq})
                titer_rows.append(
                    {"Parameter": f"Titer ({TiterConstants.TITER_UNIT})", "Value": titer_result.titer}
                )
            pd.DataFrame(titer_rows).to_excel(writer, sheet_name="Titer", index=False)

        _write_qc_sheet(writer, fitted_curve)

    return output.getvalue()


def _write_qc_sheet(writer, fitted_curve: FittedCurve):
    """Write QC Report sheet with summary stats and one row per assessed metric."""
    qc_stats = CurveQualityControl.get_summary_stats(fitted_curve)
    rows = []

    if qc_stats:
        rows.append({"Metric": "Standard Points", "Value": qc_stats.get("n_points", "")})
        rows.append({"Metric": "Efficiency (%)", "Value": qc_stats.get("efficiency_pct", "")})
        rows.append({"Metric": "Warnings", "Value": qc_stats.get("warning_count", "")})
        rows.append({"Metric": "Status", "Value": qc_stats.get("status", "")})

    if rows:
        pd.DataFrame(rows).to_excel(writer, sheet_name="QC_Report", index=False, startrow=0)

    checks = CurveQualityControl.assess(fitted_curve)
    if checks:
        start_row = len(rows) + 3 if rows else 0
        pd.DataFrame(checks).rename(
            columns={"metric": "Metric", "value": "Value", "status": "Status", "severity": "Severity"}
        ).to_excel(writer, sheet_name="QC_Report", index=False, startrow=start_row)
