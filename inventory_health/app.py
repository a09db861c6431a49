import asyncio

import pandas as pd
import streamlit as st

# Configuration
from inventory_health.config import get_config

from inventory_health.analytics.export import EXPORT_HEADERS, format_row, encode_csv
from inventory_health.client.session import DashboardSession
from inventory_health.data.models import SORT_FIELDS, Status
from inventory_health.data.util import category_options, store_options
from inventory_health.errors import EmptyExportError

st.set_page_config(page_title="Inventory Health", layout="wide")

config = get_config()

# -----------------------------------------------------------------------------
# Session: one DashboardSession per browser session, fetched on first load
# -----------------------------------------------------------------------------
if "session" not in st.session_state:
    st.session_state.session = DashboardSession()
    asyncio.run(st.session_state.session.refresh())
session: DashboardSession = st.session_state.session

# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------
st.title("Inventory Health")

h1, h2 = st.columns([4, 1])
if h2.button("↻ Refresh", help="Refresh inventory data"):
    asyncio.run(session.refresh())

if session.error:
    st.error(session.error)
    if st.button("Retry"):
        asyncio.run(session.controller.retry())
        st.rerun()

# -----------------------------------------------------------------------------
# Sidebar filters (choices sourced from the full snapshot)
# -----------------------------------------------------------------------------
st.sidebar.header("Filters")

records = session.snapshot.records
stores = store_options(records).values
categories = category_options(records).values

store_sel = st.sidebar.selectbox("Store", stores)
cat_sel = st.sidebar.selectbox("Category", categories)
critical_only = st.sidebar.checkbox("Critical only")
search = st.sidebar.text_input("Search SKU (contains)")

session.set_store(store_sel)
session.set_category(cat_sel)
session.set_critical_only(critical_only)
session.type_search(search)
# text_input only reports a value on enter or blur
session.commit_search(immediate=True)

# -----------------------------------------------------------------------------
# Sort controls: re-selecting a column flips direction, a new column starts ascending
# -----------------------------------------------------------------------------
st.sidebar.header("Sort")
for field in SORT_FIELDS:
    arrow = ""
    if session.sort.field == field:
        arrow = " ↑" if session.sort.ascending else " ↓"
    if st.sidebar.button(f"{field}{arrow}", key=f"sort_{field}"):
        session.toggle_sort(field)
        st.rerun()

view = session.view()
h1.caption(f"Last updated: {view.last_updated}")

# -----------------------------------------------------------------------------
# Summary cards (whole inventory, independent of filters)
# -----------------------------------------------------------------------------
counts = view.summary.status_counts
c1, c2, c3 = st.columns(3)
c1.metric(Status.CRITICAL.value, f"{counts.critical:,}")
c2.metric(Status.WARNING.value, f"{counts.warning:,}")
c3.metric(Status.SAFE.value, f"{counts.safe:,}")

# -----------------------------------------------------------------------------
# Table (left) + analytics panel (right)
# -----------------------------------------------------------------------------
left, right = st.columns([3, 1])

with left:
    st.markdown(f"### Predictions ({len(view.rows):,} of {view.total_records:,})")
    if view.rows:
        table = pd.DataFrame([format_row(r) for r in view.rows], columns=EXPORT_HEADERS)
        st.dataframe(table, use_container_width=True, hide_index=True)
    else:
        st.info("No records found")

    try:
        csv_text = encode_csv(view.rows)
    except EmptyExportError:
        st.caption("No data to export")
    else:
        st.download_button(
            "↓ Export",
            data=csv_text,
            file_name=config.export_filename,
            mime="text/csv",
            help="Export filtered data as CSV",
        )

with right:
    st.markdown("### Top critical")
    if view.summary.top_critical:
        for item in view.summary.top_critical:
            days = "∞" if item.never_stocks_out else f"{item.days_to_stockout:.1f}"
            st.markdown(f"**{item.sku_id}**  \n{item.store_id} • Days: {days}")
    else:
        st.caption("No critical items")

    st.markdown("### Critical by store")
    if view.critical_by_store_display:
        st.bar_chart(pd.Series(view.critical_by_store_display, name="critical"))
    else:
        st.caption("No critical items")

# -----------------------------------------------------------------------------
# Footer
# -----------------------------------------------------------------------------
with st.expander("How predictions work"):
    st.write(
        "Predictions are computed upstream from recent sales. Each item gets an average "
        "daily sales rate, an estimate of days until stock runs out, and a recommended "
        f"reorder quantity. Critical items have <{config.critical_days_threshold:g} days of "
        f"stock remaining, Warning items have <{config.warning_days_threshold:g} days, "
        "and Safe items have more."
    )
