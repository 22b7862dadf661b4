"""
Fourier Viewer - Helper Functions
=================================
Utility functions used across the application.
"""

import logging
from typing import Any, Optional

import numpy as np

# Configure logging
logger = logging.getLogger("FourierViewer")


def as_float_array(values: Any) -> np.ndarray:
    """
    Convert a JSON array (list of numbers) into a 1-D float array.

    Args:
        values: Sequence of numbers as received from the service

    Returns:
        1-D float64 array

    Raises:
        ValueError: If the input is missing, nested or not numeric
    """
    if values is None:
        raise ValueError("Missing numeric array")
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise ValueError(f"Expected a 1-D array, got shape {array.shape}")
    return array


def round_for_display(values: np.ndarray, decimals: int) -> np.ndarray:
    """Return a rounded copy for axis labels; the input is left untouched."""
    return np.round(np.asarray(values, dtype=float), decimals)


def format_metric(value: Optional[float], decimals: int = 6) -> str:
    """Format a statistic for the UI, '—' when unavailable."""
    if value is None:
        return "—"
    return f"{value:.{decimals}f}"
