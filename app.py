"""Dash front end serving the dashboard for the local snapshot."""
from datetime import date

import dash
import dash_bootstrap_components as dbc

from components.dashboard import build_dashboard
from finance_backend.config import load_settings
from finance_backend.data_model import Snapshot
from finance_backend.engine.storage import LOCAL_KEY, build_store
from finance_backend.logging_utils import get_logger, setup_logging

settings = load_settings()
setup_logging(settings.log_level)
store = build_store(settings)
logger = get_logger(__name__)

app = dash.Dash(__name__, external_stylesheets=[dbc.themes.DARKLY])


def serve_layout():
    # Re-read on every page load so edits made through the API show up
    snapshot = store.get(LOCAL_KEY) or Snapshot()
    logger.info("rendering dashboard expenses=%d goals=%d", len(snapshot.expenses), len(snapshot.goals))
    return build_dashboard(snapshot, date.today())


app.layout = serve_layout

if __name__ == "__main__":
    app.run(debug=False, port=8050)
