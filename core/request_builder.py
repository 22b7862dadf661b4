"""
Fourier Viewer - Request Builder
================================
Maps the UI parameter state into a normalized AnalysisRequest.
"""

from dataclasses import dataclass
from typing import Any, Optional

from config import (
    DEFAULT_AMPLITUDE,
    DEFAULT_DURATION,
    DEFAULT_EXPRESSION,
    DEFAULT_FUNCTION,
    DEFAULT_HARMONICS,
    DEFAULT_PERIOD,
    DEFAULT_SAMPLING_RATE,
)
from core.models import PARAMETER_LABELS, AnalysisRequest, FunctionKind, RequestValidationError


@dataclass
class AnalysisParameters:
    """Raw values of the parameter controls, as the UI holds them"""
    function_type: Any = DEFAULT_FUNCTION
    expression: Optional[str] = DEFAULT_EXPRESSION
    amplitude: Any = DEFAULT_AMPLITUDE
    period: Any = DEFAULT_PERIOD
    duration: Any = DEFAULT_DURATION
    n_harmonics: Any = DEFAULT_HARMONICS
    sampling_rate: Any = DEFAULT_SAMPLING_RATE


def _to_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise RequestValidationError(
            f"{PARAMETER_LABELS[name]} debe ser un número, se recibió {value!r}"
        ) from None


def _to_int(name: str, value: Any) -> int:
    number = _to_float(name, value)
    if not number.is_integer():
        raise RequestValidationError(
            f"{PARAMETER_LABELS[name]} debe ser un número entero, se recibió {value!r}"
        )
    return int(number)


def build_request(params: AnalysisParameters) -> AnalysisRequest:
    """
    Normalize UI parameters into an AnalysisRequest.

    The expression is stripped and only kept for the custom function type;
    for every other type it is dropped so it never reaches the payload.

    Args:
        params: Current values of the parameter controls

    Returns:
        Validated AnalysisRequest

    Raises:
        RequestValidationError: If a value is missing, not numeric, out of
            range, or the custom expression is empty
    """
    kind = FunctionKind.from_label(params.function_type)

    expression = None
    if kind.is_custom:
        expression = (params.expression or "").strip()
        if not expression:
            raise RequestValidationError("Escribe una expresión para la función personalizada")

    return AnalysisRequest(
        function_kind=kind,
        amplitude=_to_float("amplitude", params.amplitude),
        period=_to_float("period", params.period),
        duration=_to_float("duration", params.duration),
        n_harmonics=_to_int("n_harmonics", params.n_harmonics),
        sampling_rate=_to_int("sampling_rate", params.sampling_rate),
        expression=expression,
    )
