# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: an in-memory stand-in for the SupabaseClient table API,
#   so services can be tested end to end without a project
# - Sample users, sections, links and photos
# =============================================================================

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient, SupabaseClientError

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"

STORAGE_PREFIX = "https://test-project.supabase.co/storage/v1/object/public/photos/"

# Unique keys enforced by the fake, like the real tables
UNIQUE_KEYS = {
    "section_links": ("section_id", "link_id"),
    "section_photos": ("section_id", "photo_id"),
    "profiles": ("username",),
}


# =============================================================================
# In-memory Supabase
# =============================================================================

def _matches(row: dict[str, Any], filters: dict[str, Any] | None, in_filters: dict[str, list[Any]] | None) -> bool:
    for column, value in (filters or {}).items():
        actual = row.get(column)
        if value is None:
            if actual is not None:
                return False
        elif isinstance(value, bool):
            if actual is not value:
                return False
        elif str(actual) != str(value):
            return False
    for column, values in (in_filters or {}).items():
        if str(row.get(column)) not in {str(v) for v in values}:
            return False
    return True


class FakeSupabase:
    """
    Table store with the same call signatures as SupabaseClient.

    `calls` records every (operation, table). `fail_next(op, table)` makes
    the next matching call raise SupabaseClientError.
    """

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self._failures: list[tuple[str, str]] = []
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.storage = MagicMock()
        self.storage.from_.return_value.get_public_url.side_effect = (
            lambda path: f"{STORAGE_PREFIX}{path}"
        )

    # -- helpers -------------------------------------------------------------

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def add(self, table: str, **values: Any) -> dict[str, Any]:
        """Seed a row directly (not recorded as a call)."""
        row = self._new_row(values)
        self.rows(table).append(row)
        return dict(row)

    def fail_next(self, operation: str, table: str) -> None:
        self._failures.append((operation, table))

    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "select" and call[0] != "fetch_one"]

    def _new_row(self, values: dict[str, Any]) -> dict[str, Any]:
        self._clock += timedelta(seconds=1)
        row = {"id": str(uuid.uuid4()), "created_at": self._clock.isoformat()}
        row.update({k: str(v) if isinstance(v, uuid.UUID) else v for k, v in values.items()})
        return row

    def _record(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if (operation, table) in self._failures:
            self._failures.remove((operation, table))
            raise SupabaseClientError(
                message=f"Simulated {operation} failure on {table}",
                code=f"{operation.upper()}_FAILED",
            )

    def _check_unique(self, table: str, row: dict[str, Any], ignore: dict[str, Any] | None = None) -> None:
        key = UNIQUE_KEYS.get(table)
        if not key or any(row.get(column) is None for column in key):
            return
        for existing in self.rows(table):
            if existing is ignore:
                continue
            if all(str(existing.get(c)) == str(row.get(c)) for c in key):
                raise SupabaseClientError(
                    message=f"duplicate key value violates unique constraint on {table}",
                    code="INSERT_FAILED",
                )

    # -- SupabaseClient API --------------------------------------------------

    def get_client(self):
        client = MagicMock()
        client.storage = self.storage
        return client

    def select(self, table, columns="*", filters=None, in_filters=None, order=None, desc=False, limit=None):
        self._record("select", table)
        result = [dict(r) for r in self.rows(table) if _matches(r, filters, in_filters)]
        if order:
            result.sort(key=lambda r: (r.get(order) is None, r.get(order)), reverse=desc)
        if limit is not None:
            result = result[:limit]
        return result

    def fetch_one(self, table, filters, columns="*"):
        self._record("fetch_one", table)
        for row in self.rows(table):
            if _matches(row, filters, None):
                return dict(row)
        return None

    def insert(self, table, rows):
        self._record("insert", table)
        payload = rows if isinstance(rows, list) else [rows]
        inserted = []
        for values in payload:
            row = self._new_row(values)
            self._check_unique(table, row)
            self.rows(table).append(row)
            inserted.append(dict(row))
        return inserted

    def update(self, table, values, filters):
        self._record("update", table)
        updated = []
        for row in self.rows(table):
            if _matches(row, filters, None):
                self._check_unique(table, {**row, **values}, ignore=row)
                row.update(values)
                updated.append(dict(row))
        return updated

    def upsert(self, table, rows, on_conflict):
        self._record("upsert", table)
        key = on_conflict.split(",")
        written = []
        for values in rows:
            existing = next(
                (r for r in self.rows(table) if all(str(r.get(c)) == str(values.get(c)) for c in key)),
                None,
            )
            if existing is None:
                existing = self._new_row(values)
                self.rows(table).append(existing)
            else:
                existing.update(values)
            written.append(dict(existing))
        return written

    def delete(self, table, filters, in_filters=None):
        self._record("delete", table)
        kept, removed = [], []
        for row in self.rows(table):
            (removed if _matches(row, filters, in_filters) else kept).append(row)
        self.tables[table] = kept
        return removed


@pytest.fixture
def fake_db(monkeypatch):
    """Route every SupabaseClient call to a fresh FakeSupabase."""
    fake = FakeSupabase()
    for name in ("get_client", "select", "fetch_one", "insert", "update", "upsert", "delete"):
        monkeypatch.setattr(SupabaseClient, name, getattr(fake, name))
    return fake


# =============================================================================
# Sample data
# =============================================================================

@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def links_section(fake_db):
    return fake_db.add("sections", user_id=USER_ID, type="links", order_index=0, is_active=True)


@pytest.fixture
def make_link(fake_db):
    def _make(title: str, is_active: bool = True, user_id: str = USER_ID) -> dict[str, Any]:
        return fake_db.add(
            "links",
            user_id=user_id,
            title=title,
            url=f"https://example.com/{title.lower()}",
            is_active=is_active,
            text_color=None,
            background_color=None,
        )
    return _make


@pytest.fixture
def make_photo(fake_db):
    def _make(name: str, user_id: str = USER_ID) -> dict[str, Any]:
        return fake_db.add("photos", user_id=user_id, url=f"{STORAGE_PREFIX}{user_id}/{name}.jpg", caption=None)
    return _make


@pytest.fixture
def sample_profile(fake_db):
    return fake_db.add(
        "profiles",
        id=USER_ID,
        first_name="Ana",
        last_name="Souza",
        username="ana",
        bio="Baker",
        avatar_url=None,
        store_hours=None,
        address=None,
        sales_pitch=None,
        is_visible_in_directory=True,
    )
