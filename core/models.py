"""
Fourier Viewer - Data Models
============================
Core data structures for analysis requests, service results,
chart datasets and the session state.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from config import DEFAULT_SAMPLING_RATE


class RequestValidationError(ValueError):
    """Raised when UI parameters cannot form a valid analysis request"""


# Field names as shown next to the form
PARAMETER_LABELS = {
    "amplitude": "Amplitud",
    "period": "Período",
    "duration": "Duración",
    "n_harmonics": "Número de armónicos",
    "sampling_rate": "Frecuencia de muestreo",
}


class FunctionKind(Enum):
    """Test signal families understood by the analysis service"""
    SINE = "Seno"
    COSINE = "Coseno"
    SQUARE = "Onda Cuadrada"
    TRIANGLE = "Onda Triangular"
    SAWTOOTH = "Onda Diente de Sierra"
    PULSE = "Pulso"
    CUSTOM = "Personalizada"

    @property
    def is_custom(self) -> bool:
        return self is FunctionKind.CUSTOM

    @classmethod
    def from_label(cls, label: Any) -> "FunctionKind":
        """Resolve a FunctionKind from its wire label (or pass one through)."""
        if isinstance(label, cls):
            return label
        for kind in cls:
            if kind.value == label:
                return kind
        raise RequestValidationError(f"Tipo de función desconocido: {label!r}")


@dataclass(frozen=True)
class AnalysisRequest:
    """Normalized parameters sent to the analysis service"""
    function_kind: FunctionKind
    amplitude: float
    period: float
    duration: float
    n_harmonics: int
    sampling_rate: int = DEFAULT_SAMPLING_RATE
    expression: Optional[str] = None

    def __post_init__(self):
        for name in ("amplitude", "period", "duration"):
            if not getattr(self, name) > 0:
                raise RequestValidationError(f"{PARAMETER_LABELS[name]} debe ser mayor que cero")
        if self.n_harmonics < 1:
            raise RequestValidationError(f"{PARAMETER_LABELS['n_harmonics']} debe ser al menos 1")
        if self.sampling_rate < 1:
            raise RequestValidationError(
                f"{PARAMETER_LABELS['sampling_rate']} debe ser mayor que cero"
            )

        if self.function_kind.is_custom:
            if not self.expression:
                raise RequestValidationError(
                    "La función personalizada requiere una expresión"
                )
        elif self.expression is not None:
            raise RequestValidationError(
                f"La expresión solo se admite para la función {FunctionKind.CUSTOM.value}"
            )

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for POST /api/analyze."""
        payload: Dict[str, Any] = {
            "function_type": self.function_kind.value,
            "amplitude": self.amplitude,
            "period": self.period,
            "duration": self.duration,
            "n_harmonics": self.n_harmonics,
            "sampling_rate": self.sampling_rate,
        }
        if self.function_kind.is_custom:
            payload["expression"] = self.expression
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AnalysisRequest":
        return cls(
            function_kind=FunctionKind.from_label(payload.get("function_type")),
            amplitude=float(payload.get("amplitude", 0)),
            period=float(payload.get("period", 0)),
            duration=float(payload.get("duration", 0)),
            n_harmonics=int(payload.get("n_harmonics", 0)),
            sampling_rate=int(payload.get("sampling_rate", DEFAULT_SAMPLING_RATE)),
            expression=payload.get("expression"),
        )


@dataclass(frozen=True)
class Statistics:
    """Approximation error summary computed by the service"""
    mse: float
    rmse: float
    max_error: float

    def to_dict(self) -> Dict[str, float]:
        return {"mse": self.mse, "rmse": self.rmse, "max_error": self.max_error}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Statistics"]:
        """Parse statistics, returning None when absent or not numeric."""
        if not isinstance(data, Mapping):
            return None
        try:
            return cls(
                mse=float(data["mse"]),
                rmse=float(data["rmse"]),
                max_error=float(data["max_error"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


class AnalysisResult:
    """
    Read-only view of the analysis service response.

    The payload is owned by the service and kept as received; nothing is
    validated up front. Consumers extract the sections they need and must
    treat missing or malformed sections as absent.
    """

    def __init__(self, payload: Mapping[str, Any]):
        self._payload = MappingProxyType(dict(payload))

    @property
    def payload(self) -> Mapping[str, Any]:
        return self._payload

    def section(self, name: str) -> Mapping[str, Any]:
        """Return a sub-object such as 'original_signal' (KeyError if absent)."""
        value = self._payload[name]
        if not isinstance(value, Mapping):
            raise TypeError(f"Section {name!r} is not an object")
        return value

    @property
    def statistics(self) -> Optional[Statistics]:
        return Statistics.from_dict(self._payload.get("statistics"))

    def __repr__(self):
        return f"AnalysisResult(sections={sorted(self._payload)})"


@dataclass
class ChartDataset:
    """
    Bounded, render-ready data for the four charts.

    Rebuilt wholesale for every new result and discarded on the next
    request or on error.
    """
    signal: pd.DataFrame        # time, original, fourier
    error: pd.DataFrame         # time, error
    coefficients: pd.DataFrame  # n, an, bn, magnitude
    spectrum: pd.DataFrame      # frequency, magnitude
    stride: int = 1
    statistics: Optional[Statistics] = None


class SessionStatus(Enum):
    """Lifecycle of one analysis request"""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    """Current request lifecycle state; holds the raw result only on success"""
    status: SessionStatus = SessionStatus.IDLE
    request: Optional[AnalysisRequest] = None
    result: Optional[AnalysisResult] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SessionState":
        return cls()

    @classmethod
    def loading(cls, request: AnalysisRequest) -> "SessionState":
        return cls(status=SessionStatus.LOADING, request=request)

    @classmethod
    def success(cls, request: AnalysisRequest, result: AnalysisResult) -> "SessionState":
        return cls(status=SessionStatus.SUCCESS, request=request, result=result)

    @classmethod
    def error(cls, request: Optional[AnalysisRequest], message: str) -> "SessionState":
        return cls(status=SessionStatus.ERROR, request=request, message=message)

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    def to_store(self) -> Dict[str, Any]:
        """Serializable summary for dcc.Store (raw arrays are not stored)."""
        statistics = self.result.statistics if self.result is not None else None
        return {
            "status": self.status.value,
            "message": self.message,
            "request": self.request.to_payload() if self.request else None,
            "statistics": statistics.to_dict() if statistics else None,
        }
