import logging

import streamlit as st
import pandas as pd

from qpcr_titer.constants import (
    AnalysisConstants,
    CQ_COLUMN,
    DEFAULT_DILUTION_FACTOR,
    DEFAULT_GENOME_LENGTH_BP,
    DEFAULT_UNKNOWN_CQ,
    SQ_COLUMN,
    TiterConstants,
)
from qpcr_titer.prediction import TiterResult
from qpcr_titer.parser import StandardCurveParser
from qpcr_titer.quality_control import CurveQualityControl
from qpcr_titer.graph import CurveGraphGenerator
from qpcr_titer.export import export_to_excel
from qpcr_titer.utils import (
    format_predicted_sq,
    format_regression_report,
    format_titer,
    get_editor_base,
    get_session,
    is_new_upload,
    load_upload,
    reset_session,
)

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

# ==================== PAGE CONFIG ====================
st.set_page_config(page_title="TaqMan qPCR Standard Curve Analysis", layout="wide")

# ==================== SESSION STATE INIT ====================
session = get_session(st.session_state)

# ==================== UI ====================
st.title("🧬 TaqMan qPCR Standard Curve Analysis")

with st.sidebar:
    # ---------- Step I ----------
    st.header("Step I: Input Your Standard Curve Data")

    uploaded_file = st.file_uploader("Upload standard curve CSV (Cq, SQ)", type=["csv"])
    if uploaded_file is not None and is_new_upload(st.session_state, uploaded_file.file_id):
        parsed = StandardCurveParser.parse(uploaded_file)
        if parsed is not None and not parsed.empty:
            load_upload(st.session_state, parsed, uploaded_file.file_id)
            st.success(f"✅ {uploaded_file.name}: {len(parsed)} standard points")

    # Editor base changes only on a new upload or a reset
    edited = st.data_editor(
        get_editor_base(st.session_state),
        num_rows="dynamic",
        key="standard_curve_editor",
        column_config={
            CQ_COLUMN: st.column_config.NumberColumn("Cq", format="%.2f"),
            SQ_COLUMN: st.column_config.NumberColumn("SQ", format="%.3e"),
        },
    )
    if isinstance(edited, pd.DataFrame):
        session.set_dataset(edited)

    st.caption("Edit the Cq and SQ values directly in the table above.")
    st.caption("Ensure SQ values are greater than 0.")
    if st.button("↺ Reset to example data"):
        session = reset_session(st.session_state)
        st.rerun()

    st.markdown("---")

    # ---------- Step II ----------
    st.header("Step II: Predict Sample Quantity (SQ)")
    st.caption("Enter a Cq value from your unknown sample to predict its starting quantity (SQ).")
    session.set_unknown_cq(
        st.number_input("Cq value:", value=DEFAULT_UNKNOWN_CQ, key="unknown_cq")
    )

    result = session.result
    if result.predicted_sq is not None:
        st.write(format_predicted_sq(result.predicted_sq))
    else:
        st.warning(f"⚠️ {result.prediction_error}")

    st.markdown("---")

    # ---------- Step III ----------
    st.header("Step III: Calculate Virus Titer")
    st.caption("Provide the viral genome length and dilution factor to calculate the titer.")
    st.markdown(
        "**Formula:** Titer = (SQ × 10<sup>-9</sup> × 6.022×10<sup>23</sup> × dilution factor)"
        " / (length × 650)",
        unsafe_allow_html=True,
    )
    cols = st.columns(2)
    with cols[0]:
        genome_length = st.number_input(
            "Viral Genome Length (bp):", value=DEFAULT_GENOME_LENGTH_BP, min_value=1.0,
            key="genome_length",
        )
    with cols[1]:
        dilution_factor = st.number_input(
            "Dilution Factor:", value=DEFAULT_DILUTION_FACTOR, min_value=1.0,
            key="dilution_factor",
        )
    session.set_genome_length(genome_length)
    result = session.set_dilution_factor(dilution_factor)

    if result.titer is not None:
        st.write(format_titer(result.titer))
    else:
        st.warning(f"⚠️ {result.titer_error}")

# ==================== MAIN PANEL ====================
st.header("Standard Curve Results")

if result.fitted_curve is None:
    st.error(
        "Please ensure all Cq and SQ values are numeric and SQ > 0. "
        f"({result.curve_error})"
    )
else:
    fitted = result.fitted_curve
    st.code(format_regression_report(fitted), language=None)

    for message in fitted.warnings:
        st.warning(f"⚠️ {message}")

    fig = CurveGraphGenerator.create_standard_curve_graph(
        session.dataset,
        fitted,
        unknown_cq=session.unknown_cq,
        predicted_sq=result.predicted_sq,
    )
    st.plotly_chart(fig, use_container_width=True)

    with st.expander("🔍 Quality control", expanded=False):
        qc_rows = CurveQualityControl.assess(fitted)
        st.dataframe(pd.DataFrame(qc_rows), hide_index=True)
        st.dataframe(CurveQualityControl.get_point_table(session.dataset, fitted), hide_index=True)
        st.caption(
            f"Ideal efficiency: {AnalysisConstants.EFFICIENCY_IDEAL_MIN * 100:.0f}%-"
            f"{AnalysisConstants.EFFICIENCY_IDEAL_MAX * 100:.0f}%; "
            f"titer unit: {TiterConstants.TITER_UNIT}"
        )

    titer_result = None
    if result.titer is not None:
        titer_result = TiterResult(predicted_sq=result.predicted_sq, titer=result.titer)

    st.download_button(
        "📥 Download Excel report",
        data=export_to_excel(session.dataset, fitted, session.titer_inputs, titer_result),
        file_name="standard_curve_analysis.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
