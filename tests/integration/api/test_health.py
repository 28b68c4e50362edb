from fastapi.testclient import TestClient

from setlist_share.api.main import app


def test_health_check():
    # No lifespan: the health route needs neither rules nor storage
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "api"}


def test_setlist_routes_mounted():
    paths = {route.path for route in app.routes}
    assert "/api/setlists" in paths
    assert "/api/setlists/{setlist_id}" in paths
    assert "/api/setlists/{setlist_id}/collaborators/{target_user_id}" in paths
