import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import square
from territory_api.api.dependencies import get_geocoder
from territory_api.config import settings
from territory_api.main import create_app
from territory_api.persistence import database
from territory_api.services.geocoding import NominatimGeocoder


@pytest.fixture
def api_client(fake_supabase) -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def admin_client(api_client: TestClient, auth_disabled) -> TestClient:
    return api_client


def _create_partner(client: TestClient, name: str, active: bool = True) -> str:
    response = client.post("/api/partners", json={"name": name, "active": active})
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _create_territory(client: TestClient, partner_id: str, name: str, polygons, priority: int = 0) -> str:
    response = client.post(
        "/api/territories",
        json={"partner_id": partner_id, "name": name, "priority": priority, "polygons": polygons},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_health_endpoints(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}

    database_status = api_client.get("/api/health/database").json()
    assert database_status["connected"] is True
    assert database_status["counts"] == {"partners": 0, "territories": 0, "quotes": 0}


def test_territory_and_quote_workflow(admin_client: TestClient):
    p0 = _create_partner(admin_client, "North Movers")
    p1 = _create_partner(admin_client, "Harbour Freight")
    t1 = _create_territory(admin_client, p0, "Downtown", [square(45.50, -73.57, 0.05)])
    t2 = _create_territory(admin_client, p1, "East", [square(45.50, -73.545, 0.05)], priority=1)
    t3 = _create_territory(admin_client, p0, "Laval", [square(45.70, -73.80, 0.05)])

    listed = admin_client.get("/api/territories").json()
    assert {item["id"] for item in listed} == {t1, t2, t3}
    first = next(item for item in listed if item["id"] == t1)
    assert first["geojson"]["type"] == "MultiPolygon"
    ring = square(45.50, -73.57, 0.05)[0]
    assert first["polygons"][0][0] == [list(point) for point in ring]
    assert first["geojson"]["coordinates"][0][0] == [[lng, lat] for lat, lng in ring]
    assert first["partner_name"] == "North Movers"

    preview = admin_client.get("/api/assignments", params={"lat": 45.50, "lng": -73.57}).json()
    assert preview["assignment"]["territory_id"] == t2

    created = admin_client.post("/api/quotes", json={"address": "1 Main St", "lat": 45.50, "lng": -73.57})
    assert created.status_code == 201
    assert created.json()["partner_id"] == p1

    in_t3 = admin_client.post("/api/quotes", json={"lat": 45.70, "lng": -73.80}).json()
    assert in_t3["territory_id"] == t3

    nowhere = admin_client.post("/api/quotes", json={"lat": 0, "lng": 0}).json()
    assert nowhere["status"] == "unassigned"
    assert nowhere["reason"] == "no_territory_match"

    quotes = admin_client.get("/api/quotes", params={"status": "assigned", "page_size": 1}).json()
    assert quotes["total"] == 2
    assert quotes["has_next_page"] is True
    assert quotes["items"][0]["territory_name"] == "Laval"

    detail = admin_client.get(f"/api/quotes/{nowhere['quote_id']}").json()
    assert detail["status"] == "unassigned"


def test_overlap_endpoints_and_priority_resolution(admin_client: TestClient):
    p0 = _create_partner(admin_client, "North Movers")
    p1 = _create_partner(admin_client, "Harbour Freight")
    t1 = _create_territory(admin_client, p0, "Downtown", [square(45.50, -73.57, 0.05)], priority=2)
    t2 = _create_territory(admin_client, p1, "East", [square(45.50, -73.545, 0.05)], priority=5)
    t3 = _create_territory(admin_client, p1, "Far", [square(46.50, -72.0, 0.05)], priority=9)

    audit = admin_client.get("/api/territories/overlaps").json()
    assert audit["total"] == 1
    assert {audit["items"][0]["t1_id"], audit["items"][0]["t2_id"]} == {t1, t2}
    assert audit["items"][0]["overlap_area"] > 0

    scoped = admin_client.get(f"/api/territories/{t1}/overlaps").json()
    assert [item["other_id"] for item in scoped["overlaps"]] == [t2]
    assert scoped["highlighted_territory_ids"] == [t1, t2]

    assert admin_client.get(f"/api/territories/{t3}/overlaps").json()["highlighted_territory_ids"] == []

    resolved = admin_client.post(f"/api/territories/{t1}/resolve-overlap").json()
    assert resolved == {"territory_id": t1, "old_priority": 2, "new_priority": 6}

    preview = admin_client.get("/api/assignments", params={"lat": 45.50, "lng": -73.55}).json()
    assert preview["assignment"]["territory_id"] == t1

    feature_collection = admin_client.get("/api/territories/geojson", params={"highlight": t2}).json()
    highlighted = {feature["id"] for feature in feature_collection["features"] if feature["properties"]["highlighted"]}
    assert highlighted == {t1, t2}

    assert admin_client.get("/api/territories/missing/overlaps").status_code == 404


def test_request_validation(admin_client: TestClient):
    assert admin_client.get("/api/assignments", params={"lat": 91, "lng": 0}).status_code == 422
    assert admin_client.get("/api/assignments", params={"lat": 0, "lng": 181}).status_code == 422
    assert admin_client.post("/api/quotes", json={"lat": 91, "lng": 0}).status_code == 422

    p0 = _create_partner(admin_client, "North Movers")
    empty = admin_client.post(
        "/api/territories",
        json={"partner_id": p0, "polygons": [[[[1.0, 1.0], [2.0, 2.0]]]]},
    )
    assert empty.status_code == 400

    out_of_range = admin_client.post(
        "/api/territories",
        json={"partner_id": p0, "polygons": [[[[95, 500], [96, 500], [96, 501]]]]},
    )
    assert out_of_range.status_code == 400
    assert "out of range" in out_of_range.json()["detail"]
    assert admin_client.get("/api/territories").json() == []

    both = admin_client.post(
        "/api/territories",
        json={"partner_id": p0, "polygons": [square(1.0, 1.0, 0.5)], "geojson": {"type": "Polygon", "coordinates": []}},
    )
    assert both.status_code == 422

    inactive = _create_partner(admin_client, "Dormant", active=False)
    assert admin_client.post(
        "/api/territories", json={"partner_id": inactive, "polygons": [square(1.0, 1.0, 0.5)]}
    ).status_code == 400

    assert admin_client.get("/api/quotes", params={"date_from": "2026-06-01", "date_to": "2026-05-01"}).status_code == 400


def test_partner_delete_conflict(admin_client: TestClient):
    p0 = _create_partner(admin_client, "North Movers")
    _create_territory(admin_client, p0, "Downtown", [square(45.50, -73.57, 0.05)])

    response = admin_client.delete(f"/api/partners/{p0}")
    assert response.status_code == 409

    assert admin_client.delete("/api/partners/unknown").status_code == 404
    assert [option["name"] for option in admin_client.get("/api/partners/active").json()] == ["North Movers"]


def test_role_checks(api_client: TestClient, fake_supabase, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "auth_enabled", True)
    fake_supabase.add_user("staff", "u-staff", "staff")
    fake_supabase.add_user("client", "u-client", "client")
    fake_supabase.add_user("admin", "u-admin", "admin")

    territory = {"partner_id": "p0", "polygons": [square(1.0, 1.0, 0.5)]}
    anonymous = api_client.post("/api/territories", json=territory)
    assert anonymous.status_code == 401
    assert anonymous.headers["WWW-Authenticate"] == "Bearer"

    as_client = api_client.post("/api/territories", json=territory, headers={"Authorization": "Bearer client"})
    assert as_client.status_code == 403

    expired = api_client.post("/api/quotes", json={"lat": 0, "lng": 0}, headers={"Authorization": "Bearer old"})
    assert expired.status_code == 401

    quote = api_client.post("/api/quotes", json={"lat": 0, "lng": 0}, headers={"Authorization": "Bearer staff"})
    assert quote.status_code == 201
    quote_id = quote.json()["quote_id"]

    assert api_client.get("/api/quotes").status_code == 200
    assert api_client.delete(f"/api/quotes/{quote_id}", headers={"Authorization": "Bearer staff"}).status_code == 403
    assert api_client.delete(f"/api/quotes/{quote_id}", headers={"Authorization": "Bearer admin"}).status_code == 200


def test_database_unavailable(api_client: TestClient, auth_disabled, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(database, "get_supabase_client", lambda: None)

    response = api_client.get("/api/territories")

    assert response.status_code == 503
    assert response.json()["detail"].startswith("Database error")


def test_geocode_endpoint(api_client: TestClient):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["q"] == "broken":
            return httpx.Response(500)
        return httpx.Response(200, json=[{"lat": "45.5", "lon": "-73.6", "display_name": "Montreal"}])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    api_client.app.dependency_overrides[get_geocoder] = lambda: NominatimGeocoder(client=client)

    found = api_client.get("/api/geocode", params={"q": "Montreal"})
    assert found.json() == {"ok": True, "found": True, "lat": 45.5, "lng": -73.6, "display_name": "Montreal"}

    assert api_client.get("/api/geocode", params={"q": ""}).status_code == 400
    assert api_client.get("/api/geocode", params={"q": "broken"}).status_code == 502


def test_saved_territory_response_includes_partner(admin_client: TestClient):
    p0 = _create_partner(admin_client, "North Movers")
    p1 = _create_partner(admin_client, "Harbour Freight")

    created = admin_client.post(
        "/api/territories",
        json={"partner_id": p0, "name": "Downtown", "polygons": [square(45.50, -73.57, 0.05)]},
    ).json()
    assert created["partner_name"] == "North Movers"
    assert created["partner_active"] is True

    updated = admin_client.put(
        f"/api/territories/{created['id']}",
        json={"partner_id": p1, "name": "Downtown", "polygons": [square(45.50, -73.57, 0.05)]},
    ).json()
    assert updated["partner_id"] == p1
    assert updated["partner_name"] == "Harbour Freight"


def test_unexpected_delete_failures_are_reported(admin_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from territory_api.services.quotes import service as quote_service
    from territory_api.services.territories import service as territory_service

    def boom(_id):
        raise RuntimeError("storage exploded")

    monkeypatch.setattr(territory_service, "delete_territory", boom)
    monkeypatch.setattr(quote_service, "delete_quote", boom)

    territory = admin_client.delete("/api/territories/t1")
    assert territory.status_code == 500
    assert territory.json()["detail"] == "Failed to delete territory 't1': storage exploded"

    quote = admin_client.delete("/api/quotes/q1")
    assert quote.status_code == 500
    assert quote.json()["detail"] == "Failed to delete quote: storage exploded"
