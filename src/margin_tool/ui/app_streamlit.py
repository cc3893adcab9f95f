"""
Streamlit UI for the Default Margin Calculator.

Features:
- Labour grid with Hour/Day toggle
- Purchases grid priced per 1.00 of cost
- Clear / Back / Calculate actions
- CSV export of the current results
"""
import streamlit as st
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from margin_tool import __version__
from margin_tool.config.logging_config import setup_logging
from margin_tool.config.settings import get_settings
from margin_tool.engine.formatting import format_value
from margin_tool.engine.models import FIELD_LABELS
from margin_tool.services.calculator_session import CalculatorSession, ValidationError


# Grid column order as shown on screen
GRID_ORDER = ('cost', 'markup', 'profit', 'margin', 'charge')


st.set_page_config(
    page_title="Default Margin Calculator",
    layout="centered",
)


@st.cache_resource
def init_logging():
    """Configure logging once per server process."""
    setup_logging()
    return True


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


try:
    init_logging()
    settings = get_settings_cached()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


if 'calculator' not in st.session_state:
    st.session_state.calculator = CalculatorSession(settings)
if 'grid_revision' not in st.session_state:
    st.session_state.grid_revision = 0

session: CalculatorSession = st.session_state.calculator


# ============================================================================
# CUSTOM CSS & STYLING
# ============================================================================
st.markdown("""
    <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
        }
        h1 {
            font-family: 'Helvetica Neue', Helvetica, Arial, sans-serif;
            font-weight: 700;
        }
    </style>
""", unsafe_allow_html=True)


# ============================================================================
# CALLBACKS
# ============================================================================
def _refresh_grids():
    """New widget keys so every input re-renders from session values."""
    st.session_state.grid_revision += 1


def _on_entry(section: str, field: str, key: str):
    raw = st.session_state.get(key, "")
    try:
        if section == 'labour':
            session.enter_labour(field, raw)
        else:
            session.enter_purchases(field, raw)
    except ValidationError:
        pass  # message is kept on the session for the banner
    _refresh_grids()


def _on_toggle_day():
    session.set_day_mode(st.session_state.day_toggle)
    _refresh_grids()


def _on_calculate():
    try:
        session.calculate()
    except ValidationError:
        pass  # message is kept on the session for the banner
    _refresh_grids()


def _on_clear():
    session.clear()
    _refresh_grids()


def _on_back():
    session.back()
    _refresh_grids()


def render_grid(section: str, record, entered: set[str], pinned_cost: bool = False):
    """Five inputs side by side; user-entered fields are marked."""
    columns = st.columns(5)
    for column, field in zip(columns, GRID_ORDER):
        key = f"{section}-{field}-{st.session_state.grid_revision}"
        label = FIELD_LABELS[field]
        if field in entered:
            label = f"{label} ✎"
        with column:
            st.text_input(
                label,
                value=format_value(field, record[field], settings),
                key=key,
                disabled=pinned_cost and field == 'cost',
                on_change=_on_entry,
                args=(section, field, key),
            )


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Default Margin Calculator")
st.caption(f"v{__version__} | {datetime.now().strftime('%Y-%m-%d')}")

with st.container(border=True):
    head_col, toggle_col = st.columns([3, 1])
    with head_col:
        st.subheader(session.labour_title())
    with toggle_col:
        st.toggle("Day" if session.is_day else "Hour", value=session.is_day,
                  key="day_toggle", on_change=_on_toggle_day)

    if session.validation_error:
        st.error(session.validation_error)
    elif session.hint():
        st.info(session.hint())

    if not session.labour_cost_entered:
        st.caption(":red[Labour cost is required]")

    render_grid('labour', session.display_labour(), session.user_entered_fields('labour'))

    st.subheader("Purchases")
    render_grid('purchases', session.purchases, session.user_entered_fields('purchases'), pinned_cost=True)

    st.divider()

    c1, c2, c3 = st.columns(3)
    with c1:
        st.button("Clear", on_click=_on_clear, use_container_width=True)
    with c2:
        st.button("Back", on_click=_on_back, disabled=not session.can_go_back, use_container_width=True)
    with c3:
        st.button("Calculate", type="primary", on_click=_on_calculate, use_container_width=True)

with st.expander("📊 Results"):
    results = session.results_frame()
    st.dataframe(results, use_container_width=True, hide_index=True)
    st.download_button(
        "📥 CSV",
        data=results.to_csv(index=False),
        file_name="margin_calculation.csv",
        mime="text/csv",
        use_container_width=True,
    )
