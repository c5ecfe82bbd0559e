"""Tests for the qpcr_titer package and the Streamlit front end.

Verifies that all public classes and functions are importable from the
package and that the app script renders a complete analysis on first run.
"""

import io
import sys
from importlib import import_module

import pandas as pd
import pytest


class UploadedCsv(io.StringIO):
    """In-memory stand-in for a Streamlit UploadedFile."""

    def __init__(self, content, name, file_id):
        super().__init__(content)
        self.name = name
        self.file_id = file_id


class TestPackageImports:
    """Verify all expected symbols are importable from the qpcr_titer package."""

    def test_import_constants(self):
        from qpcr_titer import (
            AnalysisConstants, TiterConstants, DEFAULT_STANDARD_CURVE,
            DEFAULT_UNKNOWN_CQ, DEFAULT_GENOME_LENGTH_BP, DEFAULT_DILUTION_FACTOR,
        )
        assert DEFAULT_STANDARD_CURVE["Cq"] == [22.9, 20.51, 17.8, 16.1]
        assert DEFAULT_UNKNOWN_CQ == 20
        assert DEFAULT_GENOME_LENGTH_BP == 33000
        assert DEFAULT_DILUTION_FACTOR == 400
        assert AnalysisConstants.MIN_STANDARD_POINTS == 2
        assert TiterConstants.TITER_UNIT == "genomic copies/mL"

    def test_import_errors(self):
        from qpcr_titer import (
            QPCRAnalysisError, InvalidDataError, DegenerateFitError,
            UndefinedPredictionError, MissingInputError, InvalidParameterError,
        )
        for error in (InvalidDataError, DegenerateFitError, UndefinedPredictionError,
                      MissingInputError, InvalidParameterError):
            assert issubclass(error, QPCRAnalysisError)
        assert issubclass(QPCRAnalysisError, ValueError)

    def test_import_classes(self):
        from qpcr_titer import (
            CurveFitter, TiterPredictor, StandardCurveSession,
            CurveQualityControl, StandardCurveParser, StandardCurveTable,
            CurveGraphGenerator,
        )
        assert hasattr(CurveFitter, 'fit')
        assert hasattr(CurveFitter, 'validate')
        assert hasattr(TiterPredictor, 'predict_sq')
        assert hasattr(TiterPredictor, 'compute_titer')
        assert hasattr(StandardCurveSession, 'recompute')
        assert hasattr(CurveQualityControl, 'assess')
        assert hasattr(StandardCurveParser, 'parse')
        assert hasattr(StandardCurveTable, 'read')
        assert hasattr(CurveGraphGenerator, 'create_standard_curve_graph')

    def test_import_export(self):
        from qpcr_titer import export_to_excel
        assert callable(export_to_excel)


class TestStreamlitApp:
    """Import the app script against the mocked Streamlit module."""

    def _get_app(self):
        return import_module("streamlit qpcr titer")

    def test_app_renders_default_analysis(self, mock_streamlit):
        app = self._get_app()

        assert app.result.ok
        assert app.result.titer == pytest.approx(app.session.result.titer)
        mock_streamlit.error.assert_not_called()
        mock_streamlit.plotly_chart.assert_called_once()
        mock_streamlit.download_button.assert_called_once()

    def test_app_writes_prediction_and_titer(self, mock_streamlit):
        from qpcr_titer import format_predicted_sq, format_titer

        app = self._get_app()
        written = [c.args[0] for c in mock_streamlit.write.call_args_list]

        assert format_predicted_sq(app.result.predicted_sq) in written
        assert format_titer(app.result.titer) in written

    def test_app_stores_session_in_session_state(self, mock_streamlit):
        from qpcr_titer.utils import SESSION_STATE_KEY

        app = self._get_app()
        assert mock_streamlit.session_state[SESSION_STATE_KEY] is app.session

    def test_app_shows_guidance_for_invalid_table(self, mock_streamlit):
        mock_streamlit.data_editor.return_value = pd.DataFrame({"Cq": [22.9, 20.5], "SQ": [0.0, 0.1]})
        app = self._get_app()

        assert app.result.fitted_curve is None
        mock_streamlit.error.assert_called_once()
        mock_streamlit.plotly_chart.assert_not_called()
        mock_streamlit.download_button.assert_not_called()

    def test_upload_is_loaded_once_and_edits_survive_rerun(
        self, mock_streamlit, standard_curve_csv_content
    ):
        mock_streamlit.file_uploader.return_value = UploadedCsv(
            standard_curve_csv_content, "standards.csv", "upload-1"
        )
        app = self._get_app()
        uploaded = app.session.snapshot()
        assert uploaded["Cq"].tolist() == [22.9, 20.51, 17.8, 16.1]
        mock_streamlit.success.assert_called_once()

        edited = uploaded.copy()
        edited.loc[0, "Cq"] = 23.4
        mock_streamlit.data_editor.return_value = edited

        # Rerun with the same file still in the uploader
        del sys.modules["streamlit qpcr titer"]
        app = self._get_app()

        assert app.session.snapshot()["Cq"].tolist() == [23.4, 20.51, 17.8, 16.1]
        mock_streamlit.success.assert_called_once()
        base = mock_streamlit.data_editor.call_args.args[0]
        pd.testing.assert_frame_equal(base, uploaded)

    def test_new_upload_replaces_editor_base(self, mock_streamlit):
        mock_streamlit.file_uploader.return_value = UploadedCsv(
            "Cq,SQ\n25,0.001\n15,1\n", "a.csv", "upload-1"
        )
        self._get_app()

        mock_streamlit.file_uploader.return_value = UploadedCsv(
            "Cq,SQ\n26,0.001\n16,1\n", "b.csv", "upload-2"
        )
        del sys.modules["streamlit qpcr titer"]
        app = self._get_app()

        assert app.session.snapshot()["Cq"].tolist() == [26.0, 16.0]
        assert mock_streamlit.data_editor.call_args.args[0]["Cq"].tolist() == [26.0, 16.0]
