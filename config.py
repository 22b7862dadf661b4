"""
Fourier Viewer - Configuration and Constants
============================================
Centralized configuration for the service endpoint, display limits,
parameter ranges, chart panels and export settings.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# =============================================================================
# Application Constants
# =============================================================================
APP_TITLE = "Simulador de Funciones con Análisis de Fourier"
APP_SUBTITLE = "Análisis y visualización interactiva"
ANALYZE_LABEL = "🎵 Analizar Función"
ANALYZING_LABEL = "⏳ Analizando..."
APP_HOST = "127.0.0.1"
APP_PORT = 8050
APP_URL = f"http://{APP_HOST}:{APP_PORT}"

# =============================================================================
# Analysis Service
# =============================================================================
# Read once at startup; there is no runtime-mutable configuration.
API_URL = os.environ.get("FOURIER_API_URL", "http://127.0.0.1:8000")
ANALYZE_PATH = "/api/analyze"
ANALYSIS_TIMEOUT: Optional[float] = None  # None = wait for the service
DEFAULT_SAMPLING_RATE = 1000

# =============================================================================
# Display Pipeline Limits
# =============================================================================
DISPLAY_BUDGET = 500            # Max points per time-domain chart
TIME_DECIMALS = 3
SPECTRUM_MAX_FREQUENCY = 50.0   # Hz
SPECTRUM_MAX_POINTS = 100
FREQUENCY_DECIMALS = 2
COEFFICIENT_LIMIT = 20

# =============================================================================
# Parameter Controls: (min, max, step)
# =============================================================================
AMPLITUDE_RANGE: Tuple[float, float, float] = (0.1, 5.0, 0.1)
PERIOD_RANGE: Tuple[float, float, float] = (0.5, 10.0, 0.5)
DURATION_RANGE: Tuple[float, float, float] = (1.0, 20.0, 1.0)
HARMONICS_RANGE: Tuple[int, int, int] = (1, 50, 1)

DEFAULT_FUNCTION = "Onda Cuadrada"
DEFAULT_EXPRESSION = "A * sin(2*pi*t/T)"
DEFAULT_AMPLITUDE = 1.0
DEFAULT_PERIOD = 2.0
DEFAULT_DURATION = 5.0
DEFAULT_HARMONICS = 15

# =============================================================================
# Chart Panels
# =============================================================================
@dataclass(frozen=True)
class ChartPanel:
    """One chart card: graph, export button and exported file suffix"""
    key: str
    title: str
    export_suffix: str
    height: int = 300

    @property
    def graph_id(self) -> str:
        return f"graph-{self.key}"

    @property
    def export_button_id(self) -> str:
        return f"btn-export-{self.key}"


CHART_PANELS: List[ChartPanel] = [
    ChartPanel(
        key="signal",
        title="📈 Función Original vs Aproximación de Fourier",
        export_suffix="funcion-original-vs-aproximacion.png",
    ),
    ChartPanel(
        key="error",
        title="📉 Error de Aproximación",
        export_suffix="error-aproximacion.png",
        height=250,
    ),
    ChartPanel(
        key="coefficients",
        title="📊 Coeficientes de Fourier",
        export_suffix="coeficientes-fourier.png",
    ),
    ChartPanel(
        key="spectrum",
        title="🌊 Espectro de Frecuencias (FFT)",
        export_suffix="espectro-frecuencias.png",
    ),
]

PANELS_BY_KEY: Dict[str, ChartPanel] = {panel.key: panel for panel in CHART_PANELS}

# =============================================================================
# Chart Colors
# =============================================================================
CHART_COLORS = {
    "original": "#3B82F6",
    "fourier": "#EF4444",
    "error": "#10B981",
    "an": "#3B82F6",
    "bn": "#EF4444",
    "spectrum": "#8B5CF6",
    "grid": "#E5E7EB",
}

# =============================================================================
# Snapshot Export
# =============================================================================
EXPORT_SCALE = 2
EXPORT_BACKGROUND = "#ffffff"
EXPORT_FALLBACK_WIDTH = 900     # Used when the figure has no fixed width
EXPORT_MIME_TYPE = "image/png"
# Image engine loggers silenced while rendering
EXPORT_QUIET_LOGGERS = ("kaleido", "choreographer", "logistro")


# =============================================================================
# Store Keys (for dcc.Store components)
# =============================================================================
class StoreKeys:
    """Centralized store ID constants"""
    SESSION = "store-session"
    EXPORT_REQUEST = "store-export-request"  # Clicked chart with its on-screen view
