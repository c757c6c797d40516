# app/views.py
"""Loaders and widgets shared by the pages."""

import plotly.express as px
import streamlit as st

from aggregation import bucket_frame
from auth import authed
from errors import SalesHubError
from store import fetch_entries

CHART_MARGIN = dict(l=10, r=10, t=50, b=10)


@st.cache_data(ttl=60, show_spinner=False)
def load_entries(_client, _session, user_id: str):
    # user_id keys the cache; the session object itself is not hashed
    return fetch_entries(_client, _session)


def _load(client, session):
    return load_entries(client, session, session.user_id)


def load_entries_or_empty(client):
    """Entries for the charts; on failure show a toast and return an empty list."""
    try:
        return authed(client, _load)
    except SalesHubError as e:
        st.toast(f"Failed to fetch entries: {e}", icon="⚠️")
        return []


def invalidate_entries():
    load_entries.clear()


def bar_chart(buckets, y: str, title: str):
    df = bucket_frame(buckets)
    fig = px.bar(df, x="label", y=y, title=title)
    fig.update_layout(margin=CHART_MARGIN, xaxis_title="", yaxis_title=y.title())
    return fig


def line_chart(buckets, y: str, title: str):
    df = bucket_frame(buckets)
    fig = px.line(df, x="label", y=y, markers=True, title=title)
    fig.update_layout(margin=CHART_MARGIN, xaxis_title="", yaxis_title=y.title())
    return fig


def pie_chart(buckets, values: str, title: str):
    df = bucket_frame(buckets)
    fig = px.pie(df, names="label", values=values, title=title)
    fig.update_traces(textinfo="label+value", sort=False)
    fig.update_layout(margin=CHART_MARGIN)
    return fig
