"""
Fourier Viewer - Figure Factory
===============================
Creates the four Plotly chart figures from a ChartDataset.

INPUTS/OUTPUTS:
    create_figures(dataset) -> {panel_key: go.Figure}

    Every figure carries its panel title in layout.title and an in-chart
    "reset view" button (layout.updatemenus). The spectrum adds a
    linear/log toggle. The snapshot exporter hides these menus while
    capturing.
"""

from typing import Dict, List, Optional

import plotly.graph_objects as go

from config import CHART_COLORS, PANELS_BY_KEY, ChartPanel
from core.models import ChartDataset, Statistics
from helpers import format_metric, logger


def _reset_view_menu() -> Dict:
    """Button that restores autorange on both axes."""
    return dict(
        type="buttons",
        direction="left",
        showactive=False,
        x=1.0, xanchor="right",
        y=1.02, yanchor="bottom",
        pad=dict(r=0, t=0),
        buttons=[
            dict(
                label="⟲ Vista completa",
                method="relayout",
                args=[{"xaxis.autorange": True, "yaxis.autorange": True}],
            ),
        ],
    )


def _scale_menu(log_active: bool = True) -> Dict:
    """Linear/log toggle for the y-axis."""
    return dict(
        type="buttons",
        direction="left",
        active=1 if log_active else 0,
        x=0.78, xanchor="right",
        y=1.02, yanchor="bottom",
        pad=dict(r=0, t=0),
        buttons=[
            dict(label="Lineal", method="relayout", args=[{"yaxis.type": "linear"}]),
            dict(label="Log", method="relayout", args=[{"yaxis.type": "log"}]),
        ],
    )


def _base_layout(fig: go.Figure, panel: ChartPanel, x_title: str, y_title: str,
                 menus: Optional[List[Dict]] = None):
    """Shared light styling for every chart."""
    fig.update_layout(
        template="plotly_white",
        title=dict(text=panel.title, x=0.01, xanchor="left", font=dict(size=16)),
        height=panel.height,
        margin=dict(l=60, r=20, t=60, b=50),
        legend=dict(orientation="h", yanchor="top", y=-0.2, xanchor="center", x=0.5),
        hovermode="x unified",
        updatemenus=menus if menus is not None else [_reset_view_menu()],
        uirevision=panel.key,
    )
    fig.update_xaxes(title_text=x_title, showgrid=True, gridcolor=CHART_COLORS["grid"],
                     gridwidth=1, griddash="dash")
    fig.update_yaxes(title_text=y_title, showgrid=True, gridcolor=CHART_COLORS["grid"],
                     gridwidth=1, griddash="dash")


def create_signal_figure(dataset: ChartDataset) -> go.Figure:
    """Original function vs Fourier approximation."""
    panel = PANELS_BY_KEY["signal"]
    data = dataset.signal
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=data["time"], y=data["original"],
        name="Original", mode="lines",
        line=dict(color=CHART_COLORS["original"], width=2),
    ))
    fig.add_trace(go.Scatter(
        x=data["time"], y=data["fourier"],
        name="Aproximación", mode="lines",
        line=dict(color=CHART_COLORS["fourier"], width=2, dash="dash"),
    ))
    _base_layout(fig, panel, "Tiempo (s)", "f(t)")
    return fig


def create_error_figure(dataset: ChartDataset) -> go.Figure:
    """Approximation error over time, with the error statistics as subtitle."""
    panel = PANELS_BY_KEY["error"]
    data = dataset.error
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=data["time"], y=data["error"],
        name="Error", mode="lines",
        line=dict(color=CHART_COLORS["error"], width=2),
    ))
    _base_layout(fig, panel, "Tiempo (s)", "Error")
    if dataset.statistics is not None:
        fig.add_annotation(
            text=format_statistics(dataset.statistics),
            xref="paper", yref="paper",
            x=0.0, y=1.0, xanchor="left", yanchor="bottom",
            showarrow=False,
            font=dict(size=11, color="#4B5563"),
        )
    return fig


def create_coefficients_figure(dataset: ChartDataset) -> go.Figure:
    """Grouped bars of the cosine (aₙ) and sine (bₙ) coefficients."""
    panel = PANELS_BY_KEY["coefficients"]
    data = dataset.coefficients
    fig = go.Figure()
    fig.add_trace(go.Bar(x=data["n"], y=data["an"], name="aₙ (cos)",
                         marker_color=CHART_COLORS["an"]))
    fig.add_trace(go.Bar(x=data["n"], y=data["bn"], name="bₙ (sin)",
                         marker_color=CHART_COLORS["bn"]))
    _base_layout(fig, panel, "Armónico (n)", "Coeficiente")
    fig.update_layout(barmode="group", hovermode="x")
    fig.update_xaxes(dtick=1)
    return fig


def create_spectrum_figure(dataset: ChartDataset) -> go.Figure:
    """Magnitude spectrum on a logarithmic y-axis."""
    panel = PANELS_BY_KEY["spectrum"]
    data = dataset.spectrum
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=data["frequency"], y=data["magnitude"],
        name="Magnitud", mode="lines",
        line=dict(color=CHART_COLORS["spectrum"], width=2),
    ))
    _base_layout(fig, panel, "Frecuencia (Hz)", "Magnitud",
                 menus=[_scale_menu(log_active=True), _reset_view_menu()])
    fig.update_yaxes(type="log")
    return fig


def create_figures(dataset: ChartDataset) -> Dict[str, go.Figure]:
    """
    Build every chart for a dataset.

    Returns:
        Dict keyed by panel key (signal, error, coefficients, spectrum)
    """
    figures = {
        "signal": create_signal_figure(dataset),
        "error": create_error_figure(dataset),
        "coefficients": create_coefficients_figure(dataset),
        "spectrum": create_spectrum_figure(dataset),
    }
    logger.info(
        f"Built charts: {len(dataset.signal)} signal pts (stride {dataset.stride}), "
        f"{len(dataset.coefficients)} harmonics, {len(dataset.spectrum)} spectrum pts"
    )
    return figures


def create_empty_figure(panel: ChartPanel) -> go.Figure:
    """Placeholder shown before a result exists."""
    fig = go.Figure()
    fig.update_layout(
        template="plotly_white",
        title=dict(text=panel.title, x=0.01, xanchor="left"),
        height=panel.height,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
    )
    return fig


def format_statistics(statistics: Statistics) -> str:
    """'MSE: … | RMSE: … | Max: …' with 6 decimals."""
    return (
        f"MSE: {format_metric(statistics.mse)} | "
        f"RMSE: {format_metric(statistics.rmse)} | "
        f"Max: {format_metric(statistics.max_error)}"
    )
