# app/store.py
"""Queries against the user's sales_entries and profiles rows.

Every function takes the signed-in UserSession explicitly and does nothing
(returns an empty result) when there is none.
"""

from __future__ import annotations

import logging
from datetime import datetime

from backend import RANGE_NOT_SATISFIABLE, SupabaseClient, UserSession
from errors import BackendError
from sales import ENTRY_TABLE, PROFILE_TABLE, EntryPage, NewEntry, Profile, SalesEntry, page_bounds

logger = logging.getLogger(__name__)


def _rows_to_entries(rows) -> list:
    entries = []
    for row in rows or []:
        try:
            entries.append(SalesEntry.from_row(row))
        except ValueError as e:
            logger.warning("Skipping entry %s: %s", row.get("id"), e)
    return entries


def fetch_entries(client: SupabaseClient, session: UserSession | None) -> list:
    """All of the user's entries, oldest first."""
    if session is None:
        return []
    query = (
        client.table(session, ENTRY_TABLE)
        .select("*")
        .eq("user_id", session.user_id)
        .order("created_at")
    )
    return _rows_to_entries(client.execute(query).data)


def count_entries(client: SupabaseClient, session: UserSession | None) -> int:
    if session is None:
        return 0
    query = (
        client.table(session, ENTRY_TABLE)
        .select("id", count="exact")
        .eq("user_id", session.user_id)
        .limit(1)
    )
    return client.execute(query).count or 0


def fetch_entries_page(client: SupabaseClient, session: UserSession | None, page: int, page_size: int) -> EntryPage:
    """One page of entries, newest first, with the exact total count.

    A page past the end (rows deleted, stale page number) falls back to the
    last page that exists.
    """
    page = max(1, page)
    if session is None:
        return EntryPage(page=page, page_size=page_size)
    start, end = page_bounds(page, page_size)
    query = (
        client.table(session, ENTRY_TABLE)
        .select("*", count="exact")
        .eq("user_id", session.user_id)
        .order("created_at", desc=True)
        .range(start, end)
    )
    try:
        res = client.execute(query)
    except BackendError as e:
        if e.code != RANGE_NOT_SATISFIABLE or page == 1:
            raise
        total = count_entries(client, session)
    else:
        result = EntryPage(
            entries=_rows_to_entries(res.data),
            total_count=res.count or 0,
            page=page,
            page_size=page_size,
        )
        if page <= result.total_pages:
            return result
        total = result.total_count

    last = EntryPage(total_count=total, page_size=page_size).total_pages
    if last >= page:
        raise BackendError(f"Page {page} could not be loaded.")
    logger.info("Page %s is past the end, showing page %s", page, last)
    return fetch_entries_page(client, session, last, page_size)


def fetch_entries_since(client: SupabaseClient, session: UserSession | None, since: datetime) -> list:
    if session is None:
        return []
    query = (
        client.table(session, ENTRY_TABLE)
        .select("*")
        .eq("user_id", session.user_id)
        .gte("created_at", since.astimezone().isoformat())
        .order("created_at")
    )
    return _rows_to_entries(client.execute(query).data)


def insert_entry(client: SupabaseClient, session: UserSession | None, entry: NewEntry):
    if session is None:
        return None
    res = client.execute(client.table(session, ENTRY_TABLE).insert(entry.to_row(session.user_id)))
    logger.info("Added entry for user %s (cost=%.2f)", session.user_id, entry.cost)
    created = _rows_to_entries(res.data)
    return created[0] if created else None


def fetch_profile(client: SupabaseClient, session: UserSession | None):
    if session is None:
        return None
    query = client.table(session, PROFILE_TABLE).select("*").eq("id", session.user_id)
    rows = client.execute(query).data or []
    if not rows:
        return None
    return Profile.from_row(rows[0])


def update_profile(client: SupabaseClient, session: UserSession | None, name: str):
    if session is None:
        return None
    query = client.table(session, PROFILE_TABLE).update({"name": name.strip()}).eq("id", session.user_id)
    rows = client.execute(query).data or []
    return Profile.from_row(rows[0]) if rows else None
