"""CurveGraphGenerator — Plotly standard curve chart.

Scatter of Cq against log10(SQ) with the fitted regression line and an
optional marker for the unknown sample.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from qpcr_titer.constants import (
    CQ_COLUMN,
    FIT_LINE_COLOR,
    PLOTLY_FONT_FAMILY,
    POINT_COLOR,
)
from qpcr_titer.curve import CurveFitter, FittedCurve
from qpcr_titer.errors import InvalidDataError


class CurveGraphGenerator:
    @staticmethod
    def _empty_figure(text: str) -> go.Figure:
        fig = go.Figure()
        fig.add_annotation(text=text, showarrow=False)
        return fig

    @staticmethod
    def create_standard_curve_graph(
        dataset,
        fitted_curve: Optional[FittedCurve],
        settings: dict = None,
        unknown_cq: float = None,
        predicted_sq: float = None,
    ) -> go.Figure:
        """Create the standard curve figure; an annotated empty figure if there is no fit."""
        settings = settings or {}

        if fitted_curve is None or dataset is None:
            return CurveGraphGenerator._empty_figure("No valid standard curve")

        try:
            frame = CurveFitter.coerce_dataset(dataset)
        except InvalidDataError:
            return CurveGraphGenerator._empty_figure("No valid standard curve")

        x = np.asarray(fitted_curve.log_sq_values, dtype=float)
        y = frame[CQ_COLUMN].to_numpy(dtype=float)

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=x,
                y=y,
                mode="markers",
                name="Standards",
                marker=dict(
                    color=settings.get("point_color", POINT_COLOR),
                    size=settings.get("marker_size", 10),
                ),
                hovertemplate="log10(SQ)=%{x:.3f}<br>Cq=%{y:.2f}<extra></extra>",
            )
        )

        x_line = np.linspace(x.min(), x.max(), 50)
        fig.add_trace(
            go.Scatter(
                x=x_line,
                y=fitted_curve.predicted_cq(x_line),
                mode="lines",
                name=f"Fit (R²={fitted_curve.r_squared:.4f})",
                line=dict(color=settings.get("line_color", FIT_LINE_COLOR), width=2),
            )
        )

        if unknown_cq is not None and predicted_sq is not None and predicted_sq > 0:
            fig.add_trace(
                go.Scatter(
                    x=[np.log10(predicted_sq)],
                    y=[unknown_cq],
                    mode="markers",
                    name="Unknown",
                    marker=dict(symbol="x", size=12, color="#000000"),
                )
            )

        fig.update_layout(
            title=dict(
                text=settings.get("title", "Standard Curve"),
                font=dict(size=settings.get("title_size", 20)),
            ),
            xaxis_title="Log10(Starting Quantity)",
            yaxis_title="Quantification Cycle (Cq)",
            template=settings.get("color_scheme", "plotly_white"),
            font=dict(family=PLOTLY_FONT_FAMILY, size=settings.get("font_size", 14)),
            height=settings.get("figure_height", 500),
            showlegend=settings.get("show_legend", True),
        )
        return fig
