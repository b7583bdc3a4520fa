"""
Shared fixtures: an in-memory stand-in for the Supabase client (PostgREST query
builder, auth and auth.admin) and a TestClient wired to it through
app.dependency_overrides.
"""

import copy
import itertools
import re
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_supabase, get_supabase_admin
from app.main import app
from app.scripts.seed_roles import seed

# Tables keyed by serial integers; everything else gets uuid strings
SERIAL_TABLES = {
    "artists", "studios", "students", "classes", "class_bookings",
    "studio_bookings", "studio_rental_transactions", "gigs", "gig_applications",
}

UNIQUE_COLUMNS = {
    "users": ("email",),
    "roles": ("name",),
    "actions": ("name",),
    "class_bookings": ("booking_code",),
    "studio_bookings": ("booking_code",),
}

# Embedded resource -> foreign key column on the queried table
EMBED_KEYS = {
    "roles": "role_id",
    "actions": "action_id",
    "users": "user_id",
    "classes": "class_id",
    "studios": "studio_id",
    "gigs": "gig_id",
    "artists": "artist_id",
}

_EMBED = re.compile(r"^(\w+)\((.*)\)$")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _split_columns(columns: str) -> List[str]:
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        depth += char == "("
        depth -= char == ")"
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List = []
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None
        self._offset = 0

    def select(self, columns: str = "*"):
        self.op, self.columns = "select", columns
        return self

    def insert(self, values):
        self.op, self.payload = "insert", values
        return self

    def update(self, values):
        self.op, self.payload = "update", values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def offset(self, count):
        self._offset = count
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self.db.rows(self.table) if all(f(row) for f in self.filters)]

    def _project(self, row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for part in _split_columns(columns):
            embed = _EMBED.match(part)
            if part == "*":
                out.update(copy.deepcopy(row))
            elif embed:
                name, inner = embed.groups()
                key = row.get(EMBED_KEYS[name])
                target = next((r for r in self.db.rows(name) if r.get("id") == key), None)
                out[name] = self._project(target, inner) if target else None
            else:
                out[part] = copy.deepcopy(row.get(part))
        return out

    def execute(self):
        if self.op == "insert":
            return SimpleNamespace(data=self.db.insert(self.table, self.payload))
        if self.op == "update":
            updated = []
            for row in self._matching():
                row.update(copy.deepcopy(self.payload))
                updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)
        if self.op == "delete":
            doomed = self._matching()
            self.db.tables[self.table] = [r for r in self.db.rows(self.table) if r not in doomed]
            return SimpleNamespace(data=copy.deepcopy(doomed))

        rows = self._matching()
        if self._order:
            column, desc = self._order
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0), reverse=desc)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        return SimpleNamespace(data=[self._project(row, self.columns) for row in rows])


class FakeAdmin:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth
        self.deleted: List[str] = []
        self.signed_out: List[tuple] = []

    def delete_user(self, user_id):
        self.deleted.append(user_id)
        self.auth.accounts = {e: a for e, a in self.auth.accounts.items() if a["user"].id != user_id}

    def update_user_by_id(self, user_id, attributes):
        for account in self.auth.accounts.values():
            if account["user"].id == user_id:
                account.update({k: v for k, v in attributes.items() if k == "password"})
                return SimpleNamespace(user=account["user"])
        raise Exception("User not found")

    def sign_out(self, jwt, scope="global"):
        self.signed_out.append((jwt, scope))
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.otps: Dict[str, str] = {}
        self.sent: List[tuple] = []
        self.admin = FakeAdmin(self)

    def create_identity(self, email: str, password: str = "password123", metadata=None):
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata=metadata or {},
            app_metadata={},
            created_at=_now(),
            updated_at=_now(),
            email_confirmed_at=None,
            identities=[{"provider": "email"}],
        )
        self.accounts[email] = {"user": user, "password": password}
        return user

    def issue_token(self, user_id: str) -> str:
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = user_id
        return token

    def _session(self, user_id: str):
        return SimpleNamespace(
            access_token=self.issue_token(user_id),
            refresh_token=f"refresh-{uuid.uuid4().hex}",
            expires_at=1_900_000_000,
        )

    def _user_by_id(self, user_id: str):
        for account in self.accounts.values():
            if account["user"].id == user_id:
                return account["user"]
        return None

    def sign_up(self, credentials):
        if credentials["email"] in self.accounts:
            raise Exception("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        user = self.create_identity(credentials["email"], credentials["password"], metadata)
        return SimpleNamespace(user=user, session=self._session(user.id))

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(user=account["user"], session=self._session(account["user"].id))

    def get_user(self, jwt=None):
        user = self._user_by_id(self.tokens.get(jwt, ""))
        if not user:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_out(self):
        return None

    def reset_password_for_email(self, email, options=None):
        self.sent.append(("recovery", email, options))

    def verify_otp(self, params):
        user = self._user_by_id(self.otps.pop(params["token_hash"], ""))
        if not user:
            raise Exception("Token has expired or is invalid")
        return SimpleNamespace(user=user, session=None)

    def resend(self, params):
        self.sent.append((params["type"], params["email"], params.get("options")))


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_on_insert: Dict[str, Exception] = {}
        self.auth = FakeAuth()
        self._serial = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, [])

    def insert(self, table: str, values) -> List[Dict[str, Any]]:
        if table in self.fail_on_insert:
            raise self.fail_on_insert[table]
        batch = values if isinstance(values, list) else [values]
        created = []
        for value in batch:
            row = copy.deepcopy(value)
            if row.get("id") is None:
                row["id"] = next(self._serial) if table in SERIAL_TABLES else str(uuid.uuid4())
            row.setdefault("created_at", _now())
            row.setdefault("is_active", True)
            if table == "user_roles":
                row.setdefault("assigned_at", _now())
            for column in UNIQUE_COLUMNS.get(table, ()):
                if any(r.get(column) == row.get(column) for r in self.rows(table)):
                    raise Exception(f'duplicate key value violates unique constraint "{table}_{column}_key"')
            created.append(row)
        self.rows(table).extend(created)
        return copy.deepcopy(created)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def seeded(supabase):
    seed(supabase)
    return supabase


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_supabase_admin] = lambda: supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client, role: str = "student", email: Optional[str] = None, **extra) -> Dict[str, Any]:
    """Register through the API and return the response body (asserts 201)"""
    body = {
        "email": email or f"{role}-{uuid.uuid4().hex[:8]}@example.com",
        "password": "password123",
        "name": f"Test {role.title()}",
        "phone": "9876543210",
        "role": role,
        **extra,
    }
    response = client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def make_user(supabase: FakeSupabase, role_names=("admin",), email: Optional[str] = None) -> Dict[str, Any]:
    """Create an identity, profile row and active grants directly; returns id and headers"""
    email = email or f"{'-'.join(role_names) or 'nobody'}-{uuid.uuid4().hex[:8]}@example.com"
    user = supabase.auth.create_identity(email)
    supabase.table("users").insert({
        "id": user.id, "email": email, "name": "Fixture User", "phone": "9876543210",
        "is_active": True, "email_verified": True, "updated_at": _now(),
    }).execute()
    for name in role_names:
        role = supabase.table("roles").select("id").eq("name", name).execute().data[0]
        supabase.table("user_roles").insert({"user_id": user.id, "role_id": role["id"], "is_active": True}).execute()
    token = supabase.auth.issue_token(user.id)
    return {"id": user.id, "email": email, "token": token, "headers": auth_headers(token)}


@pytest.fixture
def admin(seeded):
    return make_user(seeded, ("admin",))


@pytest.fixture
def register_user(client):
    """register_user(role, email=None, **fields) -> response body of POST /auth/register"""
    return lambda role="student", email=None, **extra: register(client, role, email, **extra)


@pytest.fixture
def user_factory(seeded):
    """user_factory(role_names, email=None) -> {"id", "email", "token", "headers"}"""
    return lambda role_names=("admin",), email=None: make_user(seeded, role_names, email)
