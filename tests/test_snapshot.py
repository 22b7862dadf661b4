"""
Unit tests for report/snapshot.py

Tests the capture protocol, restoration of the figure after success and
failure, and the downloadable PNG. Rendering is replaced by renderers that
build images with Pillow, so no browser engine is needed.
"""

import base64
import io
import logging
import unittest
import sys
import os

import plotly.graph_objects as go
from PIL import Image

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import FunctionKind
from report.snapshot import (
    ChartSnapshotExporter,
    apply_view,
    encode_png,
    quiet_loggers,
    relayout_to_layout,
    snapshot_filename,
)


def png_bytes(size=(40, 20), mode="RGBA", color=(0, 0, 0, 0)):
    with io.BytesIO() as buffer:
        Image.new(mode, size, color).save(buffer, format="PNG")
        return buffer.getvalue()


def make_figure():
    fig = go.Figure(go.Scatter(x=[0, 1, 2], y=[1, 0, 1]))
    fig.update_layout(
        title=dict(text="Espectro"),
        updatemenus=[
            dict(type="buttons", visible=True,
                 buttons=[dict(label="Log", method="relayout", args=[{"yaxis.type": "log"}])]),
            dict(type="buttons",
                 buttons=[dict(label="Reset", method="relayout", args=[{"xaxis.autorange": True}])]),
        ],
    )
    return fig


def visibility(fig):
    return [menu.visible for menu in fig.layout.updatemenus]


class RecordingRenderer:
    """Renderer that records the flushed state it was asked to draw."""

    def __init__(self, image=None):
        self.states = []
        self.image = image or png_bytes()

    def __call__(self, state):
        self.states.append(state)
        return self.image


class FailingRenderer:
    def __call__(self, state):
        raise RuntimeError("render failed")


class TestChartSnapshotExporter(unittest.TestCase):
    """Test suite for ChartSnapshotExporter."""

    def setUp(self):
        self.figure = make_figure()
        self.title_before = self.figure.layout.title.text
        self.visibility_before = visibility(self.figure)

    def assert_restored(self):
        self.assertEqual(self.figure.layout.title.text, self.title_before)
        self.assertEqual(visibility(self.figure), self.visibility_before)

    def test_export_builds_png_download(self):
        renderer = RecordingRenderer(png_bytes(size=(60, 30)))
        exporter = ChartSnapshotExporter(renderer=renderer)

        download = exporter.export(self.figure, "Onda Cuadrada", None, "espectro-frecuencias.png")

        self.assertEqual(download["filename"], "Onda Cuadrada-espectro-frecuencias.png")
        self.assertEqual(download["type"], "image/png")
        self.assertTrue(download["base64"])
        with Image.open(io.BytesIO(base64.b64decode(download["content"]))) as image:
            self.assertEqual(image.format, "PNG")
            self.assertEqual(image.mode, "RGB")
            self.assertEqual(image.size, (60, 30))
            # Transparent pixels are flattened onto white
            self.assertEqual(image.getpixel((0, 0)), (255, 255, 255))
        self.assert_restored()

    def test_controls_hidden_during_capture(self):
        renderer = RecordingRenderer()
        ChartSnapshotExporter(renderer=renderer).export(
            self.figure, FunctionKind.SINE, None, "x.png")

        state = renderer.states[0]
        self.assertEqual([menu.get("visible") for menu in state["layout"]["updatemenus"]],
                         [False, False])
        self.assertEqual(state["layout"]["title"]["text"], "Espectro")

    def test_custom_expression_appended_to_title(self):
        renderer = RecordingRenderer()
        download = ChartSnapshotExporter(renderer=renderer).export(
            self.figure, "Personalizada", "A * t * exp(-t/T)", "espectro-frecuencias.png")

        self.assertEqual(renderer.states[0]["layout"]["title"]["text"],
                         "Espectro (A * t * exp(-t/T))")
        self.assertEqual(download["filename"], "Personalizada-espectro-frecuencias.png")
        self.assert_restored()

    def test_expression_ignored_for_predefined_function(self):
        renderer = RecordingRenderer()
        ChartSnapshotExporter(renderer=renderer).export(
            self.figure, FunctionKind.PULSE, "A * t", "x.png")
        self.assertEqual(renderer.states[0]["layout"]["title"]["text"], "Espectro")

    def test_blank_custom_expression_keeps_title(self):
        renderer = RecordingRenderer()
        ChartSnapshotExporter(renderer=renderer).export(
            self.figure, FunctionKind.CUSTOM, "   ", "x.png")
        self.assertEqual(renderer.states[0]["layout"]["title"]["text"], "Espectro")

    def test_render_failure_restores_figure(self):
        exporter = ChartSnapshotExporter(renderer=FailingRenderer())

        with self.assertLogs("FourierViewer", level="ERROR"):
            download = exporter.export(self.figure, "Personalizada", "A * t", "x.png")

        self.assertIsNone(download)
        self.assert_restored()

    def test_flush_failure_restores_figure(self):
        def failing_flush(figure):
            raise RuntimeError("flush failed")

        exporter = ChartSnapshotExporter(renderer=RecordingRenderer(), flush=failing_flush)
        with self.assertLogs("FourierViewer", level="ERROR"):
            self.assertIsNone(exporter.export(self.figure, "Personalizada", "A", "x.png"))
        self.assert_restored()

    def test_capture_propagates_but_restores(self):
        exporter = ChartSnapshotExporter(renderer=FailingRenderer())
        with self.assertRaises(RuntimeError):
            exporter.capture(self.figure, FunctionKind.CUSTOM, "A * t")
        self.assert_restored()

    def test_invalid_bitmap_is_swallowed(self):
        exporter = ChartSnapshotExporter(renderer=RecordingRenderer(image=b"not a png"))
        with self.assertLogs("FourierViewer", level="ERROR"):
            self.assertIsNone(exporter.export(self.figure, "Seno", None, "x.png"))
        self.assert_restored()

    def test_unknown_function_kind_is_swallowed(self):
        exporter = ChartSnapshotExporter(renderer=RecordingRenderer())
        with self.assertLogs("FourierViewer", level="ERROR"):
            self.assertIsNone(exporter.export(self.figure, "Onda Rara", None, "x.png"))

    def test_figure_without_title_or_controls(self):
        figure = go.Figure(go.Bar(x=[1, 2], y=[3, 4]))
        renderer = RecordingRenderer()
        download = ChartSnapshotExporter(renderer=renderer).export(
            figure, "Personalizada", "A", "x.png")
        self.assertIsNotNone(download)
        self.assertEqual(renderer.states[0]["layout"]["title"]["text"], "(A)")
        self.assertIsNone(figure.layout.title.text)


class TestOnScreenView(unittest.TestCase):
    """Test suite for relayout_to_layout() and apply_view()."""

    def test_axis_type_toggle(self):
        self.assertEqual(relayout_to_layout({"yaxis.type": "linear"}),
                         {"yaxis": {"type": "linear"}})

    def test_zoom_ranges(self):
        update = relayout_to_layout({"xaxis.range[0]": 1.0, "xaxis.range[1]": 3.0,
                                     "yaxis.range": [0.1, 0.9]})
        self.assertEqual(update, {
            "xaxis": {"range": [1.0, 3.0], "autorange": False},
            "yaxis": {"range": [0.1, 0.9], "autorange": False},
        })

    def test_reset_and_unrelated_keys(self):
        update = relayout_to_layout({"xaxis.autorange": True, "yaxis.autorange": True,
                                     "dragmode": "pan", "autosize": True})
        self.assertEqual(update, {"xaxis": {"autorange": True}, "yaxis": {"autorange": True}})

    def test_half_range_dropped(self):
        self.assertEqual(relayout_to_layout({"xaxis.range[0]": 1.0}), {})
        self.assertEqual(relayout_to_layout(None), {})

    def test_apply_view(self):
        figure = make_figure()
        figure.update_yaxes(type="log")

        apply_view(figure, {"yaxis.type": "linear", "xaxis.range[0]": 0.5,
                            "xaxis.range[1]": 1.5}, width=720.4, height=310)

        self.assertEqual(figure.layout.yaxis.type, "linear")
        self.assertEqual(tuple(figure.layout.xaxis.range), (0.5, 1.5))
        self.assertEqual(figure.layout.width, 720)
        self.assertEqual(figure.layout.height, 310)

    def test_apply_empty_view(self):
        figure = make_figure()
        before = figure.to_dict()
        apply_view(figure, {}, width=None, height=0)
        self.assertEqual(figure.to_dict()["layout"], before["layout"])

    def test_invalid_axis_type(self):
        with self.assertRaises(ValueError):
            apply_view(make_figure(), {"yaxis.type": "sideways"})


class TestSnapshotHelpers(unittest.TestCase):
    """Test suite for encoding and logging helpers."""

    def test_filename(self):
        self.assertEqual(snapshot_filename(FunctionKind.TRIANGLE, "error-aproximacion.png"),
                         "Onda Triangular-error-aproximacion.png")

    def test_encode_rgb_passthrough(self):
        encoded = encode_png(png_bytes(mode="RGB", color=(10, 20, 30)))
        with Image.open(io.BytesIO(encoded)) as image:
            self.assertEqual(image.mode, "RGB")
            self.assertEqual(image.getpixel((5, 5)), (10, 20, 30))

    def test_encode_flattens_partial_alpha(self):
        encoded = encode_png(png_bytes(mode="RGBA", color=(0, 0, 0, 255)))
        with Image.open(io.BytesIO(encoded)) as image:
            self.assertEqual(image.getpixel((0, 0)), (0, 0, 0))

    def test_quiet_loggers_restores_levels(self):
        engine = logging.getLogger("kaleido")
        engine.setLevel(logging.DEBUG)
        with quiet_loggers():
            self.assertEqual(engine.level, logging.CRITICAL)
        self.assertEqual(engine.level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
