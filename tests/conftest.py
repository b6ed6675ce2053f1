import threading
import uuid
from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from joli.core.cache import TTLCache
from joli.core.dependencies import get_auth_cache
from joli.core.rate_limit import limiter
from joli.database.supabase_client import get_supabase, get_supabase_admin
from joli.main import app

UNIQUE_COLUMNS = {"games": ("join_code",)}

ORGANIZER_TOKEN = "organizer-token"
OTHER_ORGANIZER_TOKEN = "other-organizer-token"
PARTICIPANT_TOKEN = "participant-token"


class FakeQuery:
    """Just enough of postgrest's request builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self._limit = None
        self._range = None
        self._order = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def _check_unique(self, row_id, values):
        for column in UNIQUE_COLUMNS.get(self.table, ()):
            value = values.get(column)
            if value is None:
                continue
            for other in self.db.rows(self.table):
                if other["id"] != row_id and other.get(column) == value:
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{self.table}_{column}_key"',
                        "details": None,
                        "hint": None,
                    })

    def execute(self):
        with self.db.lock:
            return self._execute()

    def _execute(self):
        self.db.calls.append((self.table, self.action, list(self.filters)))
        if self.action in self.db.failing.get(self.table, ()):
            raise APIError({
                "code": "42501",
                "message": f"new row violates row-level security policy for table \"{self.table}\"",
                "details": None,
                "hint": None,
            })
        rows = self.db.rows(self.table)
        if self.action == "insert":
            row = {"id": str(uuid.uuid4()), "created_at": datetime.utcnow().isoformat(), **self.payload}
            self._check_unique(row["id"], row)
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        matched = [row for row in rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                self._check_unique(row["id"], self.payload)
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self.action == "delete":
            for row in matched:
                rows.remove(row)
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self._range:
            start, end = self._range
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[:self._limit]
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.get_user_calls = 0
        self.signed_out = False

    def add_user(self, token, user_id, email, **metadata):
        self.users[token] = SimpleNamespace(
            id=user_id, email=email, user_metadata=metadata, email_confirmed_at="2026-01-01T00:00:00Z"
        )

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        user = self.users.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_up(self, credentials):
        user = SimpleNamespace(id=str(uuid.uuid4()), email=credentials["email"],
                               user_metadata=credentials["options"]["data"])
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials):
        for token, user in self.users.items():
            if user.email == credentials["email"]:
                return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token))
        raise Exception("Invalid login credentials")

    def sign_out(self):
        self.signed_out = True


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.lock = threading.RLock()
        self.failing = {}
        self.auth = FakeAuth()

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def table(self, name):
        return FakeQuery(self, name)

    def add_game(self, **fields):
        row = {
            "id": str(uuid.uuid4()),
            "title": "Pub Quiz",
            "description": "",
            "type": "trivia",
            "organizer_id": "organizer-1",
            "status": "draft",
            "join_code": None,
            "created_at": datetime.utcnow().isoformat(),
            **fields,
        }
        self.rows("games").append(row)
        return row

    def game(self, game_id):
        return next(row for row in self.rows("games") if row["id"] == game_id)

    def queries(self, table):
        return [call for call in self.calls if call[0] == table]


@pytest.fixture
def supabase():
    db = FakeSupabase()
    db.auth.add_user(ORGANIZER_TOKEN, "organizer-1", "host@example.com")
    db.auth.add_user(OTHER_ORGANIZER_TOKEN, "organizer-2", "other@example.com")
    db.auth.add_user(PARTICIPANT_TOKEN, "participant-1", "guest@example.com", role="participant")
    db.rows("users").extend([
        {"id": "organizer-1", "email": "host@example.com", "first_name": "Ada", "role": "organizer", "is_active": True},
        {"id": "organizer-2", "email": "other@example.com", "first_name": "Bo", "role": "organizer", "is_active": True},
    ])
    return db


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_supabase_admin] = lambda: supabase
    app.dependency_overrides[get_auth_cache] = lambda: TTLCache(ttl_seconds=60)
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
