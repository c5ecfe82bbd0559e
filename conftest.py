"""
Pytest configuration and fixtures for qPCR standard curve and titer tests.

This module provides shared fixtures and mocks for testing the standard curve
application without requiring Streamlit runtime.
"""

import sys
from unittest.mock import MagicMock

import pytest
import pandas as pd
import numpy as np


# ==================== STREAMLIT MOCK ====================
# Mock streamlit before importing the main module
class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict with attribute access."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'MockSessionState' object has no attribute '{key}'")

    def __setattr__(self, key, value):
        self[key] = value

    def __delattr__(self, key):
        try:
            del self[key]
        except KeyError:
            raise AttributeError(f"'MockSessionState' object has no attribute '{key}'")


class MockContextManager:
    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass


def _create_mock_streamlit():
    mock_st = MagicMock()
    mock_st.session_state = MockSessionState()
    mock_st.error = MagicMock()
    mock_st.warning = MagicMock()
    mock_st.success = MagicMock()
    mock_st.info = MagicMock()
    mock_st.sidebar = MockContextManager()
    mock_st.columns = MagicMock(return_value=[MagicMock() for _ in range(3)])
    mock_st.expander = MagicMock(return_value=MockContextManager())
    mock_st.set_page_config = MagicMock()
    mock_st.title = MagicMock()
    mock_st.markdown = MagicMock()
    mock_st.header = MagicMock()
    mock_st.write = MagicMock()
    mock_st.code = MagicMock()
    mock_st.dataframe = MagicMock()
    mock_st.plotly_chart = MagicMock()
    mock_st.file_uploader = MagicMock(return_value=None)
    # Widgets report their default value, as on a first Streamlit run
    mock_st.number_input = MagicMock(side_effect=lambda label, value=0, **kwargs: value)
    mock_st.button = MagicMock(return_value=False)
    mock_st.download_button = MagicMock(return_value=False)
    mock_st.rerun = MagicMock()
    mock_st.cache_data = lambda f: f
    mock_st.data_editor = MagicMock(return_value=None)
    mock_st.caption = MagicMock()
    mock_st.column_config = MagicMock()
    return mock_st


sys.modules["streamlit"] = _create_mock_streamlit()


@pytest.fixture(autouse=True)
def mock_streamlit():
    """Auto-use fixture to mock Streamlit for all tests."""
    mock_st = _create_mock_streamlit()
    sys.modules["streamlit"] = mock_st
    # Modules that bound `st` at import time must see this test's mock
    parser_module = sys.modules.get("qpcr_titer.parser")
    if parser_module is not None:
        parser_module.st = mock_st

    main_module_name = "streamlit qpcr titer"
    if main_module_name in sys.modules:
        del sys.modules[main_module_name]

    yield mock_st




# ==================== SAMPLE DATA FIXTURES ====================
@pytest.fixture
def standard_curve_data():
    """The 4-point example standard curve shipped with the app."""
    return pd.DataFrame(
        {
            "Cq": [22.9, 20.51, 17.8, 16.1],
            "SQ": [0.00001, 0.01, 0.1, 1.0],
        }
    )


@pytest.fixture
def ideal_curve_data():
    """Synthetic dilution series lying exactly on a 100% efficiency line (slope -3.3219)."""
    slope = -1 / np.log10(2)
    intercept = 18.0
    sq = np.array([1e-4, 1e-3, 1e-2, 1e-1, 1.0])
    return pd.DataFrame({"Cq": slope * np.log10(sq) + intercept, "SQ": sq})


@pytest.fixture
def fitted_standard_curve(standard_curve_data):
    from qpcr_titer import CurveFitter

    return CurveFitter.fit(standard_curve_data)


@pytest.fixture
def standard_curve_csv_content():
    """CSV export of a standard curve with an instrument preamble and Ct/Quantity headers."""
    return """Experiment File Name,standards.eds,,
Run End Time,2024-01-15 10:30:00,,

Well,Sample Name,Ct,Quantity
A1,STD1,22.9,0.00001
A2,STD2,20.51,0.01
A3,STD3,17.8,0.1
A4,STD4,16.1,1
"""


@pytest.fixture
def graph_settings():
    """Default graph settings for visualization tests."""
    return {
        "title": "Standard Curve",
        "title_size": 20,
        "font_size": 14,
        "figure_height": 500,
        "color_scheme": "plotly_white",
        "show_legend": True,
        "point_color": "#1F4FD8",
        "line_color": "#EA1D22",
        "marker_size": 10,
    }
