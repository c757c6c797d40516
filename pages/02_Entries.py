# app/pages/02_Entries.py
from datetime import datetime

import streamlit as st

from aggregation import period_starts, sum_cost
from auth import authed, get_client, require_login
from config import get_settings
from errors import SalesHubError, ValidationError
from sales import EntryPage, entries_frame, money, validate_entry_form
from store import fetch_entries_page, fetch_entries_since, insert_entry
from views import invalidate_entries

st.set_page_config(page_title="Entries – SalesHub", layout="wide")
require_login()

client = get_client()
settings = get_settings()

st.markdown("## 🧾 Sales Entries")

if "entries_page" not in st.session_state:
    st.session_state["entries_page"] = 1

# ---------- Add entry ----------
st.subheader("➕ Add New Entry")
with st.form("add_entry", clear_on_submit=True):
    c1, c2, c3, c4 = st.columns(4)
    upper = c1.text_input("Upper Items")
    lower = c2.text_input("Lower Items")
    total = c3.text_input("Total Items")
    cost = c4.text_input(f"Cost ({settings.currency})")
    submitted = st.form_submit_button("Add Entry", use_container_width=True)

if submitted:
    try:
        new_entry = validate_entry_form(upper, lower, total, cost)
    except ValidationError as e:
        st.error(str(e))
    else:
        try:
            authed(client, insert_entry, new_entry)
        except SalesHubError as e:
            st.error(str(e) or "Failed to add entry")
        else:
            invalidate_entries()
            st.session_state["entries_page"] = 1
            st.toast("Entry added successfully", icon="✅")

st.markdown("---")

# ---------- Table ----------
page_no = st.session_state["entries_page"]
try:
    page = authed(client, fetch_entries_page, page_no, settings.page_size)
except SalesHubError as e:
    st.toast(f"Failed to fetch entries: {e}", icon="⚠️")
    page = EntryPage(page=page_no, page_size=settings.page_size)
if page.page != page_no:
    # requested page ran past the end; remember the clamped one
    st.session_state["entries_page"] = page.page
    st.rerun()

try:
    today_start = period_starts(datetime.now())["today"]
    today_total = sum_cost(authed(client, fetch_entries_since, today_start))
except SalesHubError as e:
    st.toast(f"Could not load today's total: {e}", icon="⚠️")
    today_total = 0.0

c_head, c_total = st.columns([3, 1])
c_head.subheader("All Entries")
c_total.metric("Today's Total", money(today_total, settings.currency))

if not page.entries:
    st.info("No entries yet. Add your first entry above!")
else:
    st.dataframe(entries_frame(page.entries), use_container_width=True, hide_index=True)

if page.total_pages > 1:
    c_prev, c_info, c_next = st.columns([1, 2, 1])
    if c_prev.button("◀ Previous", disabled=page.page <= 1, use_container_width=True):
        st.session_state["entries_page"] = max(1, page.page - 1)
        st.rerun()
    c_info.markdown(f"<div style='text-align:center;'>Page {page.page} of {page.total_pages}</div>", unsafe_allow_html=True)
    if c_next.button("Next ▶", disabled=page.page >= page.total_pages, use_container_width=True):
        st.session_state["entries_page"] = min(page.total_pages, page.page + 1)
        st.rerun()
