import itertools
from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError
from supabase import AuthError as SupabaseAuthError

from backend import SupabaseClient
from config import Settings


class FakeAuthApiError(SupabaseAuthError):
    def __init__(self, message, status):
        Exception.__init__(self, message)
        self.message = message
        self.status = status
        self.code = None
        self.name = "AuthApiError"


def _parse_ts(value):
    return datetime.fromisoformat(value) if value else None


class FakeSupabase:
    """In-memory stand-in for the hosted project, shared by every fake client."""

    def __init__(self):
        self.rows = []
        self.profiles = {}
        self.calls = []
        self.queries = []
        self.fail = False
        self.password = "secret"
        self.require_confirmation = False
        self.clock = datetime(2026, 10, 14, 9, 0, tzinfo=timezone.utc)
        self.valid_tokens = set()
        self.refresh_tokens = {}
        self._ids = itertools.count(1)
        self._tokens = itertools.count(1)

    def check(self):
        if self.fail:
            raise httpx.ConnectError("connection refused")

    def issue(self, email, name=""):
        n = next(self._tokens)
        user = SimpleNamespace(id="user-1", email=email, user_metadata={"name": name})
        session = SimpleNamespace(access_token=f"token-{n}", refresh_token=f"refresh-{n}", user=user)
        self.valid_tokens.add(session.access_token)
        self.refresh_tokens[session.refresh_token] = (email, name)
        return SimpleNamespace(user=user, session=session)

    def expire_all(self):
        self.valid_tokens.clear()

    def add_row(self, created_at, cost, total_items=1, user_id="user-1", **extra):
        row = {
            "id": str(next(self._ids)),
            "user_id": user_id,
            "created_at": created_at,
            "upper_items": 0,
            "lower_items": 0,
            "total_items": total_items,
            "cost": cost,
        }
        row.update(extra)
        self.rows.append(row)
        return row

    def new_id(self):
        return str(next(self._ids))


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.session = None

    def sign_in_with_password(self, credentials):
        self.backend.check()
        self.backend.calls.append(("sign_in", credentials))
        if credentials["password"] != self.backend.password:
            raise FakeAuthApiError("Invalid login credentials", 400)
        return self.backend.issue(credentials["email"])

    def sign_up(self, credentials):
        self.backend.check()
        self.backend.calls.append(("sign_up", credentials))
        name = credentials["options"]["data"]["name"]
        if self.backend.require_confirmation:
            user = SimpleNamespace(id="user-1", email=credentials["email"], user_metadata={"name": name})
            return SimpleNamespace(user=user, session=None)
        return self.backend.issue(credentials["email"], name)

    def refresh_session(self, refresh_token=None):
        self.backend.check()
        self.backend.calls.append(("refresh", refresh_token))
        if refresh_token not in self.backend.refresh_tokens:
            raise FakeAuthApiError("Invalid Refresh Token: Refresh Token Not Found", 400)
        # refresh tokens are single use
        email, name = self.backend.refresh_tokens.pop(refresh_token)
        return self.backend.issue(email, name)

    def set_session(self, access_token, refresh_token):
        self.backend.check()
        self.session = (access_token, refresh_token)

    def sign_out(self):
        self.backend.check()
        self.backend.calls.append(("sign_out", self.session))
        if self.session:
            self.backend.valid_tokens.discard(self.session[0])
            self.backend.refresh_tokens.pop(self.session[1], None)


class FakePostgrest:
    def __init__(self):
        self.token = None

    def auth(self, token):
        self.token = token


class FakeQuery:
    def __init__(self, backend, table, token):
        self.backend = backend
        self.table = table
        self.token = token
        self.columns = ("*",)
        self.count = None
        self.filters = []
        self.ordering = None
        self.bounds = None
        self.max_rows = None
        self.op = "select"
        self.payload = None

    def select(self, *columns, count=None):
        self.columns = columns or ("*",)
        self.count = count
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def gte(self, column, value):
        self.filters.append(("gte", column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def range(self, start, end):
        self.bounds = (start, end)
        return self

    def limit(self, size):
        self.max_rows = size
        return self

    def insert(self, row):
        self.op, self.payload = "insert", row
        return self

    def update(self, values):
        self.op, self.payload = "update", values
        return self

    def _matches(self, row):
        for kind, column, value in self.filters:
            if kind == "eq" and str(row.get(column)) != str(value):
                return False
            if kind == "gte":
                ts = _parse_ts(row.get(column))
                if ts is None or ts < _parse_ts(value):
                    return False
        return True

    def execute(self):
        backend = self.backend
        backend.check()
        backend.queries.append(self)
        if self.token not in backend.valid_tokens:
            raise APIError({"message": "JWT expired", "code": "PGRST301"})

        if self.op == "insert":
            stored = dict(self.payload, id=backend.new_id(), created_at=backend.clock.isoformat())
            backend.rows.append(stored)
            return SimpleNamespace(data=[dict(stored)], count=None)

        source = backend.rows if self.table == "sales_entries" else list(backend.profiles.values())
        rows = [r for r in source if self._matches(r)]

        if self.op == "update":
            for r in rows:
                r.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in rows], count=None)

        if self.ordering:
            column, desc = self.ordering
            rows.sort(key=lambda r: r.get(column) or "", reverse=desc)
        total = len(rows)
        if self.bounds:
            start, end = self.bounds
            if start > 0 and start >= total:
                raise APIError({"message": "Requested range not satisfiable", "code": "PGRST103"})
            rows = rows[start:end + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        if self.columns != ("*",):
            rows = [{c: r.get(c) for c in self.columns} for r in rows]
        return SimpleNamespace(data=[dict(r) for r in rows], count=total if self.count else None)


class FakeClient:
    def __init__(self, backend):
        self.backend = backend
        self.auth = FakeAuth(backend)
        self.postgrest = FakePostgrest()

    def table(self, name):
        return FakeQuery(self.backend, name, self.postgrest.token)


@pytest.fixture
def settings():
    return Settings(supabase_url="https://demo.supabase.co", supabase_key="anon-key")


@pytest.fixture
def fake_backend():
    return FakeSupabase()


@pytest.fixture
def client(settings, fake_backend):
    created = []

    def factory(url, key):
        created.append((url, key))
        return FakeClient(fake_backend)

    c = SupabaseClient(settings, factory=factory)
    c.created = created
    return c


@pytest.fixture
def session(client):
    return client.sign_in("owner@example.com", "secret")
