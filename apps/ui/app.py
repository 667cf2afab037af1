# apps/ui/app.py

# 1) Streamlit FIRST — config must be the first Streamlit command
import streamlit as st
st.set_page_config(page_title="Patient Query", layout="wide")

# 2) Then the rest of imports (none of these should call st.* at import time)
import sys
from pathlib import Path

import streamlit.components.v1 as components

# Make project root importable
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apps.console.controller import QueryConsoleController
from apps.console.export import download_artifact
from apps.console.renderer import EmptyView, ErrorView, TableView
from apps.ui.browser import BrowserClipboard, BrowserDownload, clipboard_snippet, copy_refresh_interval
from console_core.config.config import CONFIG
from console_core.data.database import DatabaseService

# --- Session-scoped objects ---
if "db" not in st.session_state:
    st.session_state.db = DatabaseService()
if "controller" not in st.session_state:
    st.session_state.controller = QueryConsoleController(
        st.session_state.db, clipboard=BrowserClipboard(), file_saver=BrowserDownload()
    )
if "sql_query" not in st.session_state:
    st.session_state.sql_query = st.session_state.controller.query_text

db: DatabaseService = st.session_state.db
controller: QueryConsoleController = st.session_state.controller

if not db.is_initialized:
    with st.spinner("Initializing database..."):
        try:
            db.initialize()
        except Exception as e:
            st.error(f"Database initialization failed: {e}")
            st.stop()

# --- Callbacks ---
def _on_query_change():
    controller.set_query_text(st.session_state.sql_query)

def _on_example(text: str):
    controller.load_example(text)
    st.session_state.sql_query = text

# Header
st.title("Patient Query")
st.caption("Run custom SQL queries against the patient database")

# --- Query input ---
st.text_area(
    "SQL Query",
    key="sql_query",
    height=140,
    placeholder="Enter your SQL query here...",
    on_change=_on_query_change,
)

cols = st.columns([1, 1, 4, 1])
for i, (label, text) in enumerate(CONFIG["console"]["examples"].items()):
    cols[i].button(f"📋 {label}", on_click=_on_example, args=(text,), key=f"example_{i}")

run = cols[3].button("Run Query", type="primary", key="run_query", disabled=controller.is_executing)
if run:
    controller.set_query_text(st.session_state.sql_query)
    with st.spinner("Executing..."):
        controller.execute()

# --- Results header: reruns on its own while "Copied!" is showing ---
refresh = copy_refresh_interval(controller.copied, controller.copied_reset_ms)

@st.fragment(run_every=refresh)
def results_header():
    # copied flipped since this fragment was set up; rebuild the page so the refresh matches
    if (refresh is not None) != controller.copied:
        st.rerun()

    view = controller.view()
    head, copy_col, dl_col = st.columns([4, 1, 1])
    head.subheader("Query Results")

    copy_label = "✅ Copied!" if controller.copied else "Copy JSON"
    copy_col.button(copy_label, key="copy_json", on_click=controller.copy_results,
                    disabled=not view.can_export)

    artifact = download_artifact(controller.result)
    dl_col.download_button(
        "Download JSON",
        data=artifact.payload if artifact else "",
        file_name=CONFIG["export"]["file_name"],
        mime=CONFIG["export"]["mime"],
        on_click=controller.download_results,
        disabled=artifact is None,
    )

    if controller.notice:
        st.warning(controller.notice)

    clipboard = controller.clipboard
    if isinstance(clipboard, BrowserClipboard):
        pending = clipboard.take()
        if pending is not None:
            components.html(clipboard_snippet(pending), height=0)

# --- Results ---
if controller.result is not None:
    st.markdown("---")
    results_header()

    body = controller.view().body
    if isinstance(body, ErrorView):
        st.error(body.message)
    elif isinstance(body, EmptyView):
        st.info(body.message)
    elif isinstance(body, TableView):
        if body.mismatched_rows:
            st.caption(f"Rows {body.mismatched_rows} have different columns than the first row; "
                       "only the first row's columns are shown.")
        st.dataframe(body.to_frame(), use_container_width=True, hide_index=True)
        st.caption(f"{len(body.rows)} row(s)")

with st.sidebar:
    st.caption(f"DB: {db.db_path}")
    try:
        tables = db.tables()
    except Exception as e:
        st.warning(f"Could not list tables: {e}")
        tables = []
    if tables:
        st.markdown("**Tables**")
        for t in tables:
            st.markdown(f"- `{t}`")
