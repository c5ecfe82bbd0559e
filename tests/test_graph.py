import plotly.graph_objects as go
import pytest

from qpcr_titer import CurveGraphGenerator, TiterPredictor


class TestCurveGraphGenerator:
    def test_graph_returns_figure_with_points_and_fit(
        self, standard_curve_data, fitted_standard_curve, graph_settings
    ):
        fig = CurveGraphGenerator.create_standard_curve_graph(
            standard_curve_data, fitted_standard_curve, settings=graph_settings
        )

        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2
        points, line = fig.data
        assert list(points.x) == pytest.approx([-5.0, -2.0, -1.0, 0.0])
        assert list(points.y) == [22.9, 20.51, 17.8, 16.1]
        assert line.mode == "lines"
        assert line.y[0] == pytest.approx(fitted_standard_curve.slope * -5 + fitted_standard_curve.intercept)

    def test_graph_axis_titles(self, standard_curve_data, fitted_standard_curve):
        fig = CurveGraphGenerator.create_standard_curve_graph(standard_curve_data, fitted_standard_curve)
        assert fig.layout.xaxis.title.text == "Log10(Starting Quantity)"
        assert fig.layout.yaxis.title.text == "Quantification Cycle (Cq)"

    def test_graph_marks_unknown_sample(self, standard_curve_data, fitted_standard_curve):
        sq = TiterPredictor.predict_sq(fitted_standard_curve, 20)
        fig = CurveGraphGenerator.create_standard_curve_graph(
            standard_curve_data, fitted_standard_curve, unknown_cq=20, predicted_sq=sq
        )
        assert len(fig.data) == 3
        assert fig.data[2].name == "Unknown"
        assert fig.data[2].y[0] == 20

    def test_graph_handles_missing_fit(self, standard_curve_data):
        fig = CurveGraphGenerator.create_standard_curve_graph(standard_curve_data, None)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No valid standard curve"

    def test_graph_handles_none_data(self, fitted_standard_curve):
        fig = CurveGraphGenerator.create_standard_curve_graph(None, fitted_standard_curve)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 0
