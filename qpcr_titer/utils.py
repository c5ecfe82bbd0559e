"""Utility functions for standard curve analysis.

Contains result formatting helpers and Streamlit session state management.
"""

import numpy as np

from qpcr_titer.constants import AnalysisConstants, TiterConstants
from qpcr_titer.curve import FittedCurve
from qpcr_titer.session import StandardCurveSession

SESSION_STATE_KEY = "standard_curve_session"
EDITOR_BASE_KEY = "standard_curve_editor_base"
UPLOAD_ID_KEY = "standard_curve_upload_id"


def format_scientific(value, digits: int = AnalysisConstants.DISPLAY_DIGITS) -> str:
    """Format in scientific notation with `digits` significant digits (e.g. 5.615e+08)."""
    if value is None:
        return "NA"
    value = float(value)
    if not np.isfinite(value):
        return str(value)
    return np.format_float_scientific(
        value, precision=max(digits - 1, 0), unique=False, trim="-", exp_digits=2
    )


def format_equation(fitted_curve: FittedCurve) -> str:
    return (
        f"Cq = {round(fitted_curve.slope, 4)} * log10(SQ) + "
        f"{round(fitted_curve.intercept, 4)}"
    )


def format_regression_report(fitted_curve: FittedCurve) -> str:
    """Plain-text block with the equation, regression metrics and efficiency."""
    eff_pct = round(fitted_curve.efficiency_pct, AnalysisConstants.EFFICIENCY_DECIMALS)
    lines = [
        "Standard Curve Equation:",
        format_equation(fitted_curve),
        "",
        "Regression Metrics:",
        f"Slope (m): {round(fitted_curve.slope, 4)}",
        f"Y-intercept (b): {round(fitted_curve.intercept, 4)}",
        f"R-squared (R²): {round(fitted_curve.r_squared, 4)}",
        "",
        "PCR Efficiency:",
        f"Efficiency: {eff_pct} %",
        (
            f"(Ideal efficiency is {AnalysisConstants.EFFICIENCY_IDEAL_MIN * 100:.0f}% - "
            f"{AnalysisConstants.EFFICIENCY_IDEAL_MAX * 100:.0f}%)"
        ),
    ]
    for message in fitted_curve.warnings:
        lines.append(f"Warning: {message}")
    return "\n".join(lines)


def format_predicted_sq(predicted_sq) -> str:
    return f"Predicted SQ: {format_scientific(predicted_sq)}"


def format_titer(titer) -> str:
    return f"Virus Titer: {format_scientific(titer)} {TiterConstants.TITER_UNIT}"


# ==================== SESSION STATE MANAGEMENT ====================
def get_session(session_state):
    """Return the StandardCurveSession stored in session state, creating it on first use.

    Args:
        session_state: Streamlit session state object (or dict-like)
    """
    if session_state.get(SESSION_STATE_KEY) is None:
        session_state[SESSION_STATE_KEY] = StandardCurveSession()
    return session_state[SESSION_STATE_KEY]


def reset_session(session_state):
    """Replace the stored session with a fresh one seeded with the default inputs.

    The editor base is reset too. The last upload id is kept so a file still
    sitting in the uploader is not loaded again.
    """
    session = StandardCurveSession()
    session_state[SESSION_STATE_KEY] = session
    session_state[EDITOR_BASE_KEY] = session.dataset
    return session


def get_editor_base(session_state):
    """Table the data editor applies its edits to.

    The editor reports edits as deltas against the frame it was given, so this
    frame only changes on a new upload or a reset, never on an edit.
    """
    if session_state.get(EDITOR_BASE_KEY) is None:
        session_state[EDITOR_BASE_KEY] = get_session(session_state).dataset
    return session_state[EDITOR_BASE_KEY]


def load_upload(session_state, dataset, upload_id):
    """Make an uploaded table the new editor base and the session dataset."""
    session_state[EDITOR_BASE_KEY] = dataset
    session_state[UPLOAD_ID_KEY] = upload_id
    return get_session(session_state).set_dataset(dataset)


def is_new_upload(session_state, upload_id) -> bool:
    return upload_id != session_state.get(UPLOAD_ID_KEY)
