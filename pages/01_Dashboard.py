# app/pages/01_Dashboard.py
from datetime import datetime

import streamlit as st

from aggregation import Granularity, aggregate, summarize
from auth import get_client, require_login
from config import get_settings
from sales import money
from views import line_chart, load_entries_or_empty

st.set_page_config(page_title="Dashboard – SalesHub", layout="wide")
require_login()

client = get_client()
settings = get_settings()

FILTERS = {
    "Today": Granularity.HOUR,
    "This Week": Granularity.DAY,
    "This Month": Granularity.WEEK,
    "This Year": Granularity.MONTH,
}

# --- Header + filter ---
c_title, c_filter = st.columns([3, 1])
c_title.title("📊 Dashboard")
choice = c_filter.selectbox("Period", list(FILTERS.keys()), key="dashboard_filter")

now = datetime.now()
entries = load_entries_or_empty(client)
stats = summarize(entries, now, week_start=settings.week_start)

# ---- KPIs ----
k1, k2, k3, k4 = st.columns(4)
k1.metric("Today", money(stats.today, settings.currency))
k2.metric("This Week", money(stats.week, settings.currency))
k3.metric("This Month", money(stats.month, settings.currency))
k4.metric("This Year", money(stats.year, settings.currency))

st.markdown("---")

# ---- Sales trend chart ----
buckets = aggregate(entries, FILTERS[choice], now)
st.plotly_chart(line_chart(buckets, "sales", "Sales Trend"), use_container_width=True)

if not entries:
    st.info("No entries yet. Add your first entry on the Entries page.")
