"""
Fourier Viewer - Display Reduction Engine
=========================================
Bounds the service's numeric arrays to chart-friendly sizes.

    decimate(*series)          every k-th sample, same k for all series
    window_spectrum(f, mag)    0 < f <= 50 Hz, first 100 entries
    truncate_coefficients(...) first min(20, n_harmonics) harmonics, 1-based
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from config import (
    COEFFICIENT_LIMIT,
    DISPLAY_BUDGET,
    FREQUENCY_DECIMALS,
    SPECTRUM_MAX_FREQUENCY,
    SPECTRUM_MAX_POINTS,
)
from helpers import as_float_array, round_for_display


@dataclass
class DecimationResult:
    """Decimated parallel series plus the source index of every output point"""
    stride: int
    indices: np.ndarray
    series: Tuple[np.ndarray, ...]

    def __len__(self):
        return len(self.indices)


def decimation_stride(n_samples: int, budget: int = DISPLAY_BUDGET) -> int:
    """
    Stride k = ceil(N / B), never below 1.

    Args:
        n_samples: Number of samples N
        budget: Display budget B

    Returns:
        Stride to apply to every parallel series
    """
    if budget < 1:
        raise ValueError("budget must be at least 1")
    if n_samples <= 0:
        return 1
    return max(1, math.ceil(n_samples / budget))


def decimate(
    *series: Sequence[float],
    budget: int = DISPLAY_BUDGET,
    stride: Optional[int] = None,
) -> DecimationResult:
    """
    Keep samples 0, k, 2k, ... of every series.

    All series are indexed with the same stride, so output[i] of each one
    comes from source index i * k.

    Args:
        *series: Parallel series of equal length
        budget: Display budget used to compute the stride
        stride: Explicit stride (overrides budget), used to keep a second
            family of series aligned with the first

    Returns:
        DecimationResult with ceil(N / k) points per series

    Raises:
        ValueError: If the series do not share the same length
    """
    arrays = tuple(as_float_array(s) for s in series)
    lengths = {len(a) for a in arrays}
    if len(lengths) > 1:
        raise ValueError(f"Parallel series differ in length: {sorted(lengths)}")

    n_samples = lengths.pop() if lengths else 0
    if stride is None:
        stride = decimation_stride(n_samples, budget)
    elif stride < 1:
        raise ValueError("stride must be at least 1")

    indices = np.arange(0, n_samples, stride)
    return DecimationResult(
        stride=stride,
        indices=indices,
        series=tuple(a[indices] for a in arrays),
    )


def window_spectrum(
    frequencies: Sequence[float],
    magnitudes: Sequence[float],
    max_frequency: float = SPECTRUM_MAX_FREQUENCY,
    max_points: int = SPECTRUM_MAX_POINTS,
) -> pd.DataFrame:
    """
    Restrict a spectrum to its display-relevant low-frequency range.

    Frequencies are rounded to 2 decimals first; entries with
    0 < frequency <= max_frequency are kept in input order and the first
    max_points of them returned.

    Returns:
        DataFrame with columns frequency, magnitude
    """
    freq = as_float_array(frequencies)
    mag = as_float_array(magnitudes)
    if len(freq) != len(mag):
        raise ValueError("frequencies and magnitudes differ in length")

    freq = round_for_display(freq, FREQUENCY_DECIMALS)
    mask = (freq > 0) & (freq <= max_frequency)
    return pd.DataFrame({
        "frequency": freq[mask][:max_points],
        "magnitude": mag[mask][:max_points],
    })


def truncate_coefficients(
    an: Sequence[float],
    bn: Sequence[float],
    magnitudes: Sequence[float],
    n_harmonics: int,
    limit: int = COEFFICIENT_LIMIT,
) -> pd.DataFrame:
    """
    First min(limit, n_harmonics) harmonics, numbered from 1 (fundamental).

    Returns:
        DataFrame with columns n, an, bn, magnitude
    """
    if n_harmonics < 1:
        raise ValueError("n_harmonics must be at least 1")
    an, bn, magnitudes = (as_float_array(c) for c in (an, bn, magnitudes))
    if not len(an) == len(bn) == len(magnitudes):
        raise ValueError("Coefficient arrays differ in length")

    count = min(limit, n_harmonics, len(an))
    return pd.DataFrame({
        "n": np.arange(1, count + 1),
        "an": an[:count],
        "bn": bn[:count],
        "magnitude": magnitudes[:count],
    })
