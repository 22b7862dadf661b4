"""
Fourier Viewer - Callbacks
==========================
Dash callbacks: expression panel, analysis run and chart export.

Export is a two-step chain: a clientside callback records which chart was
clicked together with its on-screen view (axis state and pixel size) into
StoreKeys.EXPORT_REQUEST, and the server callback renders that view.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from dash import Input, Output, State, html, no_update
import plotly.graph_objects as go

from config import ANALYZE_LABEL, ANALYZING_LABEL, CHART_PANELS, ChartPanel, StoreKeys
from core.models import ChartDataset, FunctionKind, RequestValidationError, SessionState, SessionStatus
from core.request_builder import AnalysisParameters, build_request
from core.session import AnalysisClient, AnalysisSessionController
from helpers import format_metric, logger
from report.snapshot import ChartSnapshotExporter, apply_view
from viz.figure_factory import create_empty_figure, create_figures

SHOW = {"display": "block"}
HIDE = {"display": "none"}

NO_CHART_DATA_MESSAGE = "La respuesta del servicio no contiene datos para graficar."

# store, one figure per chart, then charts/placeholder styles, two alerts and feedback
ANALYSIS_OUTPUT_COUNT = 1 + len(CHART_PANELS) + 7

EXPORT_BUTTONS: Dict[str, ChartPanel] = {panel.export_button_id: panel for panel in CHART_PANELS}

# Button state while a request is in flight: (output, running value, idle value)
ANALYSIS_RUNNING = [
    (Output("btn-analyze", "disabled"), True, False),
    (Output("btn-analyze", "children"), ANALYZING_LABEL, ANALYZE_LABEL),
]


def render_session(state: SessionState, dataset: Optional[ChartDataset]) -> Tuple:
    """
    Map a session state and its dataset to the analysis callback outputs.

    Returns:
        (store, *figures, charts style, placeholder style,
         error text, error open, success content, success open, feedback)
    """
    if dataset is not None:
        figures = create_figures(dataset)
        figure_list = [figures[panel.key] for panel in CHART_PANELS]
    else:
        figure_list = [create_empty_figure(panel) for panel in CHART_PANELS]

    error_text = None
    if state.status is SessionStatus.ERROR:
        error_text = state.message
    elif state.status is SessionStatus.SUCCESS and dataset is None:
        error_text = NO_CHART_DATA_MESSAGE

    success_content = None
    if dataset is not None:
        statistics = dataset.statistics
        success_content = [
            html.Div("✓ Análisis completado", className="fw-bold"),
            html.Div(f"MSE: {format_metric(statistics.mse if statistics else None)}",
                     className="small"),
        ]

    return (
        state.to_store(),
        *figure_list,
        SHOW if dataset is not None else HIDE,
        HIDE if dataset is not None else SHOW,
        error_text,
        error_text is not None,
        success_content,
        success_content is not None,
        None,
    )


def submit_analysis(client: AnalysisClient, params: AnalysisParameters) -> Tuple:
    """
    Run one analysis from the form values.

    Invalid parameters only fill the form feedback; every other output is
    left as it is and no request is sent.
    """
    try:
        request = build_request(params)
    except RequestValidationError as e:
        logger.info(f"Analysis not submitted: {e}")
        return (no_update,) * (ANALYSIS_OUTPUT_COUNT - 1) + (str(e),)

    controller = AnalysisSessionController(client)
    state = controller.submit(request)
    return render_session(state, controller.chart_dataset())


def export_panel(
    exporter: ChartSnapshotExporter,
    export_request: Optional[Mapping[str, Any]],
    figures: Mapping[str, Any],
    relayouts: Mapping[str, Any],
    function_type: Any,
    expression: Optional[str],
):
    """
    Export the chart named by an export request.

    Args:
        exporter: Snapshot exporter
        export_request: {"button", "width", "height", "view"} from the browser
        figures: Figure dicts keyed by panel key, as held by the graphs
        relayouts: Last relayoutData keyed by panel key
        function_type: Active function type label
        expression: Active custom expression

    Returns:
        dcc.Download payload, or no_update when there is nothing to export
    """
    panel = EXPORT_BUTTONS.get((export_request or {}).get("button"))
    if panel is None:
        return no_update

    figure_state = figures.get(panel.key)
    if not figure_state:
        return no_update

    figure = go.Figure(figure_state, skip_invalid=True)
    # Live view from the browser wins over the last relayout event
    view = dict(relayouts.get(panel.key) or {})
    view.update(export_request.get("view") or {})
    try:
        apply_view(figure, view, width=export_request.get("width"),
                   height=export_request.get("height"))
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring on-screen view of {panel.key}: {e}")

    payload = exporter.export(figure, function_type, expression, panel.export_suffix)
    return payload if payload is not None else no_update


def register_callbacks(app, client: Optional[AnalysisClient] = None,
                       exporter: Optional[ChartSnapshotExporter] = None):
    """Register all callbacks with the Dash app."""
    client = client if client is not None else AnalysisClient()
    exporter = exporter if exporter is not None else ChartSnapshotExporter()

    # =========================================================================
    # 1. CUSTOM EXPRESSION PANEL
    # =========================================================================
    @app.callback(
        Output("expression-container", "style"),
        Input("select-function", "value"),
    )
    def toggle_expression(function_type):
        """Show the expression editor only for the custom function."""
        return SHOW if function_type == FunctionKind.CUSTOM.value else HIDE

    # =========================================================================
    # 2. RUN ANALYSIS
    # =========================================================================
    analysis_outputs: List[Output] = (
        [Output(StoreKeys.SESSION, "data")]
        + [Output(panel.graph_id, "figure") for panel in CHART_PANELS]
        + [
            Output("charts-container", "style"),
            Output("placeholder-ready", "style"),
            Output("alert-error", "children"),
            Output("alert-error", "is_open"),
            Output("alert-success", "children"),
            Output("alert-success", "is_open"),
            Output("form-feedback", "children"),
        ]
    )

    @app.callback(
        analysis_outputs,
        Input("btn-analyze", "n_clicks"),
        [
            State("select-function", "value"),
            State("input-expression", "value"),
            State("slider-amplitude", "value"),
            State("slider-period", "value"),
            State("slider-duration", "value"),
            State("slider-harmonics", "value"),
        ],
        running=ANALYSIS_RUNNING,
        prevent_initial_call=True,
    )
    def run_analysis(n_clicks, function_type, expression, amplitude, period, duration, n_harmonics):
        """Build the request, query the service and render the charts."""
        params = AnalysisParameters(
            function_type=function_type,
            expression=expression,
            amplitude=amplitude,
            period=period,
            duration=duration,
            n_harmonics=n_harmonics,
        )
        return submit_analysis(client, params)

    # =========================================================================
    # 3. CHART EXPORT
    # =========================================================================
    @app.callback(
        Output("download-chart", "data"),
        Input(StoreKeys.EXPORT_REQUEST, "data"),
        [State(panel.graph_id, "figure") for panel in CHART_PANELS]
        + [State(panel.graph_id, "relayoutData") for panel in CHART_PANELS]
        + [State("select-function", "value"), State("input-expression", "value")],
        prevent_initial_call=True,
    )
    def export_chart(export_request, *args):
        """Capture the requested chart as PNG."""
        n_panels = len(CHART_PANELS)
        keys = [panel.key for panel in CHART_PANELS]
        figures = dict(zip(keys, args[:n_panels]))
        relayouts = dict(zip(keys, args[n_panels:2 * n_panels]))
        function_type, expression = args[2 * n_panels:]
        return export_panel(exporter, export_request, figures, relayouts,
                            function_type, expression)


def register_clientside_callbacks(app):
    """Register clientside callbacks that read the live browser state."""

    # Record the clicked chart with its current axes and pixel size
    app.clientside_callback(
        """
        function() {
            const ctx = window.dash_clientside.callback_context;
            if (!ctx.triggered.length || !ctx.triggered[0].value) {
                return window.dash_clientside.no_update;
            }
            const buttonId = ctx.triggered[0].prop_id.split(".")[0];
            const graphId = buttonId.replace("btn-export-", "graph-");
            const container = document.getElementById(graphId);
            const plot = container ? container.querySelector(".js-plotly-plot") : null;
            const view = {};
            if (plot && plot.layout) {
                Object.keys(plot.layout).forEach(function(name) {
                    if (!/^[xy]axis\\d*$/.test(name) || !plot.layout[name]) {
                        return;
                    }
                    ["type", "range", "autorange"].forEach(function(prop) {
                        const value = plot.layout[name][prop];
                        if (value !== undefined) {
                            view[name + "." + prop] = value;
                        }
                    });
                });
            }
            return {
                button: buttonId,
                width: plot ? plot.clientWidth : null,
                height: plot ? plot.clientHeight : null,
                view: view,
                requested_at: Date.now()
            };
        }
        """,
        Output(StoreKeys.EXPORT_REQUEST, "data"),
        [Input(panel.export_button_id, "n_clicks") for panel in CHART_PANELS],
        prevent_initial_call=True,
    )
