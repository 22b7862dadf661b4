"""
Fourier Viewer - Chart Data Assembler
=====================================
Turns one AnalysisResult into the four bounded chart datasets.
Pure and deterministic: same result in, same dataset out.
"""

from typing import Any, Optional

import pandas as pd

from config import DISPLAY_BUDGET, TIME_DECIMALS
from core.models import AnalysisResult, ChartDataset
from helpers import logger, round_for_display
from ops.engine import decimate, truncate_coefficients, window_spectrum


def assemble_chart_data(
    result: Optional[Any],
    n_harmonics: Optional[int] = None,
    budget: int = DISPLAY_BUDGET,
) -> Optional[ChartDataset]:
    """
    Build the signal, error, coefficient and spectrum datasets.

    The UI renders before any result exists, so a missing or structurally
    incomplete result yields None instead of raising.

    Args:
        result: AnalysisResult, a raw response mapping, or None
        n_harmonics: Requested harmonic count (defaults to len(an))
        budget: Display budget for the time-domain charts

    Returns:
        ChartDataset, or None when there is nothing renderable
    """
    if result is None:
        return None
    if not isinstance(result, AnalysisResult):
        if not isinstance(result, dict):
            logger.warning(f"Ignoring result of type {type(result).__name__}")
            return None
        result = AnalysisResult(result)

    try:
        return _assemble(result, n_harmonics, budget)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Incomplete analysis result, no charts: {e!r}")
        return None


def _assemble(result: AnalysisResult, n_harmonics: Optional[int], budget: int) -> ChartDataset:
    original = result.section("original_signal")
    approximation = result.section("fourier_approximation")
    error = result.section("error_signal")
    coefficients = result.section("coefficients")
    spectrum = result.section("frequency_spectrum")

    signal = decimate(
        original["time"], original["values"], approximation["values"], budget=budget
    )
    time, original_values, fourier_values = signal.series

    # Error chart reuses the signal stride so both charts share sample positions
    error_points = decimate(error["time"], error["values"], stride=signal.stride)
    error_time, error_values = error_points.series

    an = coefficients["an"]
    if n_harmonics is None:
        n_harmonics = len(an) or 1

    return ChartDataset(
        signal=pd.DataFrame({
            "time": round_for_display(time, TIME_DECIMALS),
            "original": original_values,
            "fourier": fourier_values,
        }),
        error=pd.DataFrame({
            "time": round_for_display(error_time, TIME_DECIMALS),
            "error": error_values,
        }),
        coefficients=truncate_coefficients(
            an, coefficients["bn"], coefficients["magnitudes"], n_harmonics
        ),
        spectrum=window_spectrum(spectrum["frequencies"], spectrum["magnitudes"]),
        stride=signal.stride,
        statistics=result.statistics,
    )
