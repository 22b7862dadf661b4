"""
Fourier Viewer - UI Layout
==========================
Main layout and panel definitions for the Dash app.
"""

from dash import dcc, html
import dash_bootstrap_components as dbc

from config import (
    AMPLITUDE_RANGE,
    ANALYZE_LABEL,
    APP_SUBTITLE,
    APP_TITLE,
    CHART_PANELS,
    DEFAULT_AMPLITUDE,
    DEFAULT_DURATION,
    DEFAULT_EXPRESSION,
    DEFAULT_FUNCTION,
    DEFAULT_HARMONICS,
    DEFAULT_PERIOD,
    DURATION_RANGE,
    HARMONICS_RANGE,
    PERIOD_RANGE,
    ChartPanel,
    StoreKeys,
)
from core.models import FunctionKind, SessionState
from viz.figure_factory import create_empty_figure


def create_layout():
    """Create the main application layout"""
    return dbc.Container([
        # =====================================================================
        # STORES (State management)
        # =====================================================================
        dcc.Store(id=StoreKeys.SESSION, data=SessionState.idle().to_store()),
        dcc.Store(id=StoreKeys.EXPORT_REQUEST),
        dcc.Download(id="download-chart"),

        # =====================================================================
        # HEADER
        # =====================================================================
        html.Div([
            html.H1(APP_TITLE, className="fw-bold text-primary mb-2"),
            html.P(APP_SUBTITLE, className="text-muted"),
        ], className="text-center my-4"),

        # =====================================================================
        # MAIN CONTENT
        # =====================================================================
        dbc.Row([
            dbc.Col(create_controls_panel(), lg=4, className="mb-4"),
            dbc.Col([
                create_ready_placeholder(),
                dcc.Loading(
                    html.Div(
                        [create_chart_card(panel) for panel in CHART_PANELS],
                        id="charts-container",
                        style={"display": "none"},
                    ),
                    type="circle",
                ),
            ], lg=8),
        ]),
    ], fluid=True, className="py-3", style={"maxWidth": "1600px"})


def _slider(slider_id: str, label: str, bounds, value) -> html.Div:
    """Labelled slider; bounds is (min, max, step)."""
    low, high, step = bounds
    return html.Div([
        dbc.Label(label, html_for=slider_id, className="small fw-bold"),
        dcc.Slider(
            id=slider_id,
            min=low, max=high, step=step, value=value,
            marks=None,
            tooltip={"placement": "bottom", "always_visible": True},
        ),
    ], className="mb-4")


def create_controls_panel() -> dbc.Card:
    """Function selector, parameters and the analyze button"""
    return dbc.Card([
        dbc.CardHeader(html.H4("⚙️ Controles", className="mb-0")),
        dbc.CardBody([
            html.Div([
                dbc.Label("Tipo de Función", html_for="select-function", className="small fw-bold"),
                dbc.Select(
                    id="select-function",
                    options=[{"label": kind.value, "value": kind.value} for kind in FunctionKind],
                    value=DEFAULT_FUNCTION,
                ),
            ], className="mb-4"),

            html.Div([
                dbc.Label("Expresión Matemática", html_for="input-expression", className="small fw-bold"),
                dbc.Textarea(
                    id="input-expression",
                    value=DEFAULT_EXPRESSION,
                    placeholder=DEFAULT_EXPRESSION,
                    rows=3,
                    className="font-monospace small",
                ),
                html.Small("Variables: t, A, T | Funciones: sin, cos, exp, log, sqrt",
                           className="text-muted d-block mt-1"),
                create_expression_help(),
            ], id="expression-container", className="mb-4", style={"display": "none"}),

            _slider("slider-amplitude", "Amplitud (A)", AMPLITUDE_RANGE, DEFAULT_AMPLITUDE),
            _slider("slider-period", "Período (T)", PERIOD_RANGE, DEFAULT_PERIOD),
            _slider("slider-duration", "Duración (s)", DURATION_RANGE, DEFAULT_DURATION),
            _slider("slider-harmonics", "Número de Armónicos", HARMONICS_RANGE, DEFAULT_HARMONICS),

            dbc.Button(ANALYZE_LABEL, id="btn-analyze", color="primary", size="lg",
                       className="w-100"),
            html.Div(id="form-feedback", className="text-danger small mt-2"),

            dbc.Alert(id="alert-error", color="danger", is_open=False, className="mt-3 mb-0"),
            dbc.Alert(id="alert-success", color="success", is_open=False, className="mt-3 mb-0"),
        ]),
    ], className="shadow")


def create_expression_help() -> dbc.Accordion:
    """Collapsible guide to the custom expression syntax"""
    def code(text):
        return html.Code(text, className="px-1")

    return dbc.Accordion([
        dbc.AccordionItem([
            html.H6("● Variables Disponibles", className="fw-bold"),
            html.Ul([
                html.Li([code("t"), " - Variable de tiempo"]),
                html.Li([code("A"), " - Amplitud de la función"]),
                html.Li([code("T"), " - Período de la función"]),
                html.Li([code("pi"), " - Constante π (3.14159...)"]),
                html.Li([code("e"), " - Constante e (2.71828...)"]),
            ], className="small"),
            html.H6("● Operadores", className="fw-bold"),
            html.Ul([
                html.Li([code("+"), " Suma, ", code("-"), " Resta, ",
                         code("*"), " Multiplicación, ", code("/"), " División"]),
                html.Li([code("**"), " o ", code("^"), " - Potencia (ej: ",
                         code("t**2"), " o ", code("t^2"), ")"]),
            ], className="small"),
            html.H6("● Funciones Matemáticas", className="fw-bold"),
            html.Ul([
                html.Li([code(f"{name}(x)"), f" - {desc}"])
                for name, desc in [
                    ("sin", "Seno"), ("cos", "Coseno"), ("tan", "Tangente"),
                    ("exp", "Exponencial (eˣ)"), ("log", "Logaritmo natural"),
                    ("sqrt", "Raíz cuadrada"), ("abs", "Valor absoluto"),
                ]
            ], className="small"),
            html.H6("● Ejemplos de Uso", className="fw-bold"),
            html.Ul([
                html.Li([code(expr), f" - {desc}"])
                for expr, desc in [
                    ("A * sin(2*pi*t/T)", "Onda sinusoidal estándar"),
                    ("A * exp(-t) * cos(t)", "Oscilación amortiguada"),
                    ("A * (sin(t) + sin(3*t)/3)", "Suma de armónicos"),
                    ("A * t * exp(-t/T)", "Rampa exponencial"),
                ]
            ], className="small"),
            dbc.Alert([
                html.Strong("💡 Nota: "),
                "Asegúrate de usar paréntesis correctamente y evita divisiones por cero.",
            ], color="warning", className="small mb-0 p-2"),
        ], title="📖 Guía de Expresiones Matemáticas"),
    ], start_collapsed=True, className="mt-3")


def create_ready_placeholder() -> html.Div:
    """Shown until the first successful analysis"""
    return html.Div(
        dbc.Card(dbc.CardBody([
            html.Div("🎵", className="display-4 mb-3"),
            html.H3("Listo para Analizar", className="fw-bold"),
            html.P('Configura los parámetros y haz clic en "Analizar Función"',
                   className="text-muted mb-0"),
        ], className="text-center p-5"), className="shadow"),
        id="placeholder-ready",
    )


def create_chart_card(panel: ChartPanel) -> dbc.Card:
    """Chart card: export button above the graph"""
    return dbc.Card(dbc.CardBody([
        html.Div(
            dbc.Button("⤓ PNG", id=panel.export_button_id, color="primary", size="sm",
                       title="Exportar como PNG"),
            className="d-flex justify-content-end",
        ),
        dcc.Graph(
            id=panel.graph_id,
            figure=create_empty_figure(panel),
            config={"displaylogo": False, "responsive": True},
        ),
    ]), className="shadow mb-4")
