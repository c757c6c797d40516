# app/pages/03_Analytics.py
from datetime import datetime

import streamlit as st

from aggregation import Granularity, aggregate
from auth import get_client, require_login
from views import bar_chart, load_entries_or_empty, pie_chart

st.set_page_config(page_title="Analytics – SalesHub", layout="wide")
require_login()

client = get_client()

st.title("📈 Analytics")

now = datetime.now()
entries = load_entries_or_empty(client)

daily = aggregate(entries, Granularity.DAY, now)
weekly = aggregate(entries, Granularity.WEEK, now)
monthly = aggregate(entries, Granularity.MONTH, now)

left, right = st.columns(2)
left.plotly_chart(bar_chart(daily, "sales", "Weekly Performance"), use_container_width=True)
right.plotly_chart(pie_chart(daily, "items", "Weekly Items Sold"), use_container_width=True)

left, right = st.columns(2)
left.plotly_chart(bar_chart(weekly, "sales", "Monthly Sales (Last 4 Weeks)"), use_container_width=True)
right.plotly_chart(bar_chart(monthly, "sales", "Yearly Sales Trend"), use_container_width=True)
