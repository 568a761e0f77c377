import pytest
from offside_web.web import app as flask_app


@pytest.mark.e2e
def test_frontend_health():
    r = flask_app.test_client().get("/health")
    assert r.status_code == 200
    assert (r.get_json() or {}).get("ok") is True
