import pytest
from offside_web.web import app as flask_app


@pytest.mark.e2e
def test_frontend_home_page_renders():
    r = flask_app.test_client().get("/")
    assert r.status_code == 200
    html = r.data.decode("utf-8", errors="ignore").lower()
    assert "<textarea" in html and "/api/indent" in html
