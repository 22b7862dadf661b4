"""
Fourier Viewer - Chart Snapshot Export
======================================
Captures one chart figure as a PNG and hands it to the browser.

The figure is first brought to its on-screen view (apply_view): axis
state changed in the browser and the plot's pixel size.

Capture protocol (the figure is restored on every exit path):
    1. hide the in-chart controls (layout.updatemenus)
    2. append "(<expression>)" to the title for custom functions
    3. flush the pending changes into the state to render
    4. render that state at 2x on a white background (kaleido)
    5. restore title and control visibility
    6. re-encode as RGB PNG (Pillow) and build a dcc.Download payload
"""

import io
import logging
import re
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

import plotly.graph_objects as go
import plotly.io as pio
from dash import dcc
from PIL import Image

from config import (
    EXPORT_BACKGROUND,
    EXPORT_FALLBACK_WIDTH,
    EXPORT_MIME_TYPE,
    EXPORT_QUIET_LOGGERS,
    EXPORT_SCALE,
)
from core.models import FunctionKind
from helpers import logger

Renderer = Callable[[Dict[str, Any]], bytes]
Flusher = Callable[[go.Figure], Dict[str, Any]]


@contextmanager
def quiet_loggers(names=EXPORT_QUIET_LOGGERS) -> Iterator[None]:
    """Silence the image engine's diagnostic logging for the duration."""
    previous = {}
    for name in names:
        engine_logger = logging.getLogger(name)
        previous[name] = engine_logger.level
        engine_logger.setLevel(logging.CRITICAL)
    try:
        yield
    finally:
        for name, level in previous.items():
            logging.getLogger(name).setLevel(level)


def flush_figure(figure: go.Figure) -> Dict[str, Any]:
    """Freeze the figure's current (mutated) state into a plain dict."""
    return figure.to_dict()


# =============================================================================
# On-screen view
# =============================================================================
# Relayout keys such as "xaxis.range[0]", "yaxis.type", "xaxis2.autorange"
_AXIS_KEY = re.compile(
    r"^(?P<axis>[xy]axis\d*)\.(?P<prop>range|autorange|type)(?:\[(?P<index>[01])\])?$"
)


def relayout_to_layout(relayout: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Convert flat Plotly relayout keys into a nested layout update.

    Only axis type, range and autorange are taken; other keys (drag mode,
    shapes, autosize) do not change what the exported image shows.

    Example:
        {"xaxis.range[0]": 1, "xaxis.range[1]": 3, "yaxis.type": "linear"}
        -> {"xaxis": {"range": [1, 3], "autorange": False},
            "yaxis": {"type": "linear"}}
    """
    update: Dict[str, Dict[str, Any]] = {}
    for key, value in (relayout or {}).items():
        match = _AXIS_KEY.match(key)
        if not match:
            continue
        axis = update.setdefault(match.group("axis"), {})
        prop, index = match.group("prop"), match.group("index")
        if index is not None:
            bounds = axis.setdefault("range", [None, None])
            bounds[int(index)] = value
        elif prop == "range":
            axis["range"] = list(value) if value is not None else None
        else:
            axis[prop] = value

    for props in update.values():
        bounds = props.get("range")
        if bounds is None or len(bounds) != 2 or None in bounds:
            props.pop("range", None)
        elif "autorange" not in props:
            props["autorange"] = False
    return {name: props for name, props in update.items() if props}


def apply_view(figure: go.Figure, relayout: Optional[Mapping[str, Any]] = None,
               width: Optional[float] = None, height: Optional[float] = None) -> go.Figure:
    """
    Bring a server-side figure to what the browser is showing.

    Args:
        figure: Figure as last sent to the browser (modified in place)
        relayout: Axis state changed in the browser (zoom, pan, log toggle)
        width: On-screen plot width in pixels
        height: On-screen plot height in pixels

    Raises:
        ValueError: If a relayout value is not valid for the axis
    """
    update: Dict[str, Any] = dict(relayout_to_layout(relayout))
    if width:
        update["width"] = int(width)
    if height:
        update["height"] = int(height)
    if update:
        figure.update_layout(update)
    return figure


def render_png(state: Dict[str, Any]) -> bytes:
    """
    Render a figure state to PNG bytes with kaleido.

    Uses a white paper/plot background and EXPORT_SCALE times the figure's
    on-screen size. The state itself is not modified.
    """
    snapshot = go.Figure(state)
    snapshot.update_layout(paper_bgcolor=EXPORT_BACKGROUND, plot_bgcolor=EXPORT_BACKGROUND)
    width = snapshot.layout.width or EXPORT_FALLBACK_WIDTH
    height = snapshot.layout.height or int(width * 0.5)
    with quiet_loggers():
        return pio.to_image(snapshot, format="png", width=width, height=height,
                            scale=EXPORT_SCALE)


def encode_png(bitmap: bytes, background: str = EXPORT_BACKGROUND) -> bytes:
    """Re-encode a bitmap as an RGB PNG, flattening transparency onto background."""
    with Image.open(io.BytesIO(bitmap)) as image:
        if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
            rgba = image.convert("RGBA")
            flat = Image.new("RGB", rgba.size, background)
            flat.paste(rgba, mask=rgba.getchannel("A"))
        else:
            flat = image.convert("RGB")

    with io.BytesIO() as buffer:
        flat.save(buffer, format="PNG")
        return buffer.getvalue()


def snapshot_filename(function_kind: FunctionKind, suffix: str) -> str:
    """Download name: "<function type>-<chart suffix>"."""
    return f"{function_kind.value}-{suffix}"


class ChartSnapshotExporter:
    """
    Exports chart figures as downloadable PNG files.

    The renderer and flush steps are injectable so the capture can run
    without a browser engine.
    """

    def __init__(self, renderer: Optional[Renderer] = None, flush: Optional[Flusher] = None):
        self.renderer = renderer or render_png
        self.flush = flush or flush_figure

    def capture(self, figure: go.Figure, function_kind: FunctionKind,
                expression: Optional[str] = None) -> bytes:
        """
        Render the figure as it should appear in the exported image.

        The title and control visibility are restored before returning,
        including when rendering raises.

        Returns:
            PNG bytes produced by the renderer
        """
        menus = figure.layout.updatemenus
        visibility = [menu.visible for menu in menus]
        original_title = figure.layout.title.text
        try:
            for menu in menus:
                menu.visible = False

            label = (expression or "").strip()
            if function_kind.is_custom and label:
                figure.layout.title.text = f"{original_title or ''} ({label})".strip()

            state = self.flush(figure)
            return self.renderer(state)
        finally:
            figure.layout.title.text = original_title
            for menu, visible in zip(menus, visibility):
                menu.visible = visible

    def export(self, figure: go.Figure, function_kind: Any, expression: Optional[str],
               suffix: str) -> Optional[Dict[str, Any]]:
        """
        Capture a figure and build the download for dcc.Download.

        Args:
            figure: Chart figure to capture (restored afterwards)
            function_kind: Active FunctionKind or its label
            expression: Active custom expression, if any
            suffix: Fixed per-chart file suffix

        Returns:
            dcc.send_bytes payload, or None if anything failed (logged)
        """
        try:
            kind = FunctionKind.from_label(function_kind)
            bitmap = self.capture(figure, kind, expression)
            content = encode_png(bitmap)
            filename = snapshot_filename(kind, suffix)
            logger.info(f"Exported chart snapshot {filename} ({len(content)} bytes)")
            return dcc.send_bytes(content, filename, type=EXPORT_MIME_TYPE)
        except Exception as e:
            logger.exception(f"Error exporting chart: {e}")
            return None
