from __future__ import annotations

import copy
import itertools
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from territory_api.config import settings
from territory_api.models.domain import Contact, Partner, Territory


class FakeAPIError(Exception):
    """Shaped like the PostgREST error raised by the Supabase client."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str) -> None:
        self.client = client
        self.table = table
        self.op = "select"
        self.values: Any = None
        self.count_mode: str | None = None
        self.filters: list[Callable[[dict[str, Any]], bool]] = []
        self.orders: list[tuple[str, bool]] = []
        self.window: tuple[int, int] | None = None
        self.max_rows: int | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.op = "select"
        self.count_mode = count
        return self

    def insert(self, values: Any) -> "FakeQuery":
        self.op = "insert"
        self.values = values
        return self

    def update(self, values: dict[str, Any]) -> "FakeQuery":
        self.op = "update"
        self.values = values
        return self

    def delete(self) -> "FakeQuery":
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) >= str(value))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) <= str(value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.max_rows = count
        return self

    def _matching(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [row for row in rows if all(check(row) for check in self.filters)]

    def execute(self) -> FakeResponse:
        self.client.calls.append((self.table, self.op))
        if self.client.failure is not None:
            raise self.client.failure

        match self.op:
            case "insert":
                return FakeResponse(self.client.insert_rows(self.table, self.values))
            case "update":
                matched = self._matching(self.client.tables.setdefault(self.table, []))
                for row in matched:
                    row.update(copy.deepcopy(self.values))
                return FakeResponse(copy.deepcopy(matched))
            case "delete":
                matched = self._matching(self.client.tables.setdefault(self.table, []))
                self.client.check_references(self.table, matched)
                self.client.tables[self.table] = [
                    row for row in self.client.tables[self.table] if row not in matched
                ]
                return FakeResponse(copy.deepcopy(matched))

        selected = self._matching(self.client.rows_for(self.table))
        for column, desc in reversed(self.orders):
            selected.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        total = len(selected)
        if self.window is not None:
            start, end = self.window
            selected = selected[start : end + 1]
        if self.max_rows is not None:
            selected = selected[: self.max_rows]
        count = total if self.count_mode == "exact" else None
        return FakeResponse(copy.deepcopy(selected), count)


class FakeSupabase:
    """Minimal in-memory stand-in for the Supabase client's table API."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failure: Exception | None = None
        self.tokens: dict[str, str] = {}
        self._ids = itertools.count(1)
        self.auth = SimpleNamespace(get_user=self._get_user)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def insert_rows(self, table: str, values: Any) -> list[dict[str, Any]]:
        items = values if isinstance(values, list) else [values]
        inserted = []
        for item in items:
            row = copy.deepcopy(item)
            row.setdefault("id", f"{table}-{next(self._ids)}")
            row.setdefault("created_at", f"2026-05-{len(self.tables.get(table, [])) + 1:02d}T12:00:00+00:00")
            self.tables.setdefault(table, []).append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def rows_for(self, table: str) -> list[dict[str, Any]]:
        if table != "v_quotes_list":
            return list(self.tables.get(table, []))
        partners = {row["id"]: row for row in self.tables.get("partners", [])}
        territories = {row["id"]: row for row in self.tables.get("territories", [])}
        joined = []
        for row in self.tables.get("quotes", []):
            partner = partners.get(row.get("assigned_partner_id"))
            territory = territories.get(row.get("territory_id"))
            joined.append(
                {
                    **row,
                    "partner_name": partner["name"] if partner else None,
                    "territory_name": territory.get("name") if territory else None,
                }
            )
        return joined

    def check_references(self, table: str, rows: list[dict[str, Any]]) -> None:
        if table != "partners":
            return
        ids = {row["id"] for row in rows}
        referenced = any(row.get("partner_id") in ids for row in self.tables.get("territories", [])) or any(
            row.get("assigned_partner_id") in ids for row in self.tables.get("quotes", [])
        )
        if referenced:
            raise FakeAPIError(
                'update or delete on table "partners" violates foreign key constraint',
                code="23503",
            )

    def _get_user(self, token: str) -> SimpleNamespace:
        if token not in self.tokens:
            raise FakeAPIError("invalid JWT: token is expired")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[token]))

    def add_user(self, token: str, user_id: str, role: str | None) -> None:
        self.tokens[token] = user_id
        if role is not None:
            self.tables.setdefault("profiles", []).append({"user_id": user_id, "role": role})


@pytest.fixture
def fake_supabase(monkeypatch: pytest.MonkeyPatch) -> FakeSupabase:
    from territory_api.db import supabase as supabase_module
    from territory_api.persistence import database

    fake = FakeSupabase()
    monkeypatch.setattr(database, "get_supabase_client", lambda: fake)
    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: fake)
    return fake


@pytest.fixture
def auth_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "auth_enabled", False)


def square(lat: float, lng: float, half: float) -> list[list[tuple[float, float]]]:
    """One editable polygon: a closed square ring centred on (lat, lng)."""
    return [
        [
            (lat - half, lng - half),
            (lat - half, lng + half),
            (lat + half, lng + half),
            (lat + half, lng - half),
            (lat - half, lng - half),
        ]
    ]


def make_partner(partner_id: str, *, active: bool = True, name: str | None = None) -> Partner:
    return Partner(id=partner_id, name=name or f"Partner {partner_id}", contact=Contact(), active=active)


def make_territory(
    territory_id: str,
    partner_id: str,
    polygons: list,
    *,
    priority: int = 0,
    name: str | None = None,
) -> Territory:
    return Territory(
        id=territory_id,
        partner_id=partner_id,
        name=name or territory_id.upper(),
        priority=priority,
        geojson=None,
        polygons=polygons,
    )


def geojson_polygon(lat: float, lng: float, half: float) -> dict[str, Any]:
    ring = [[lng_, lat_] for lat_, lng_ in square(lat, lng, half)[0]]
    return {"type": "MultiPolygon", "coordinates": [[ring]]}
