"""
Fourier Viewer
==============
Configure a periodic or custom test signal, send it to the Fourier analysis
service and explore the result: reconstructed signal, approximation error,
coefficients and frequency spectrum, each exportable as PNG.

Usage:
    python app.py

Environment:
    FOURIER_API_URL   Base URL of the analysis service
"""

import logging
import threading
import time
import webbrowser
from typing import Optional

import dash
import dash_bootstrap_components as dbc

from config import API_URL, APP_HOST, APP_PORT, APP_TITLE, APP_URL
from core.session import AnalysisClient
from helpers import logger
from report.snapshot import ChartSnapshotExporter
from ui.callbacks import register_callbacks, register_clientside_callbacks
from ui.layout import create_layout


def create_app(client: Optional[AnalysisClient] = None,
               exporter: Optional[ChartSnapshotExporter] = None) -> dash.Dash:
    """Create and configure the Dash application."""
    app = dash.Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        title=APP_TITLE,
        update_title=None,  # Disable "Updating..." title
        suppress_callback_exceptions=True,
    )
    app.layout = create_layout()
    register_callbacks(app, client=client, exporter=exporter)
    register_clientside_callbacks(app)
    return app


def open_browser():
    """Open browser after a short delay."""
    time.sleep(1.5)
    webbrowser.open(APP_URL)


def main():
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    print("=" * 60)
    print(f"  {APP_TITLE}")
    print(f"  Server:   {APP_URL}")
    print(f"  Analysis: {API_URL}")
    print("=" * 60)

    try:
        app = create_app()
        logger.info(f"App created with {len(app.callback_map)} callbacks")

        threading.Thread(target=open_browser, daemon=True).start()
        app.run(host=APP_HOST, port=APP_PORT, debug=False, use_reloader=False)
    except KeyboardInterrupt:
        print("\n  Server stopped by user.")


if __name__ == "__main__":
    main()
