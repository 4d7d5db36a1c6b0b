"""
Route tests for the check-in web app.

Uses FastAPI's TestClient against an app wired to the temp store and
the recorder/insight doubles from conftest.
"""

import pytest
from fastapi.testclient import TestClient

from devpulse.web.app import create_app


@pytest.fixture
def client(settings, workflow):
    app = create_app(settings=settings, workflow=workflow)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def logged_in(client):
    client.post("/login", data={"email": "dev@sooft.com"})
    return client


def _post(client, **form):
    data = {"step": 1, "completion": 80, "bugs": 0, "comments": ""}
    data.update(form)
    return client.post("/checkin", data=data)


# ── Identity ───────────────────────────────────────────────────────

def test_index_asks_for_email_first(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Bienvenido a Sooft Check-in" in resp.text
    assert 'action="/login"' in resp.text


def test_invalid_email_is_rejected(client, store):
    resp = client.post("/login", data={"email": "not-an-email"})
    assert "Ingresa un email válido." in resp.text
    assert store.get_identity() is None


def test_login_opens_wizard(client, store):
    resp = client.post("/login", data={"email": "  dev@sooft.com "})

    assert resp.status_code == 200
    assert store.get_identity() == "dev@sooft.com"
    assert "1. Completitud del Sprint" in resp.text
    assert "octubre de 2026" in resp.text


def test_logout_clears_identity(logged_in, store):
    resp = logged_in.get("/logout")
    assert store.get_identity() is None
    assert "Bienvenido a Sooft Check-in" in resp.text


def test_checkin_without_identity_redirects_to_login(client):
    resp = _post(client, action="next")
    assert "Bienvenido a Sooft Check-in" in resp.text


# ── Wizard ─────────────────────────────────────────────────────────

def test_wizard_moves_through_steps(logged_in):
    resp = _post(logged_in, action="next", step=1, completion=65)
    assert "2. Cantidad de Bugs / Errores" in resp.text
    assert 'name="completion" value="65"' in resp.text

    resp = _post(logged_in, action="bugs_up", step=2, completion=65, bugs=2)
    assert "<span>3</span>" in resp.text

    resp = _post(logged_in, action="next", step=2, completion=65, bugs=3)
    assert "3. Satisfacción con el trabajo" in resp.text

    resp = _post(logged_in, action="back", step=3, completion=65, bugs=3)
    assert "2. Cantidad de Bugs / Errores" in resp.text


def test_bug_counter_stays_at_zero(logged_in):
    resp = _post(logged_in, action="bugs_down", step=2, bugs=0)
    assert "<span>0</span>" in resp.text


def test_satisfaction_required_before_comments(logged_in):
    resp = _post(logged_in, action="next", step=3)

    assert "Selecciona tu nivel de satisfacción para continuar." in resp.text
    assert "3. Satisfacción con el trabajo" in resp.text


def test_selected_satisfaction_is_kept_when_going_back(logged_in):
    resp = _post(logged_in, action="back", step=4, satisfaction=2)
    assert 'value="2" checked' in resp.text


def test_unknown_step_restarts_wizard(logged_in):
    resp = _post(logged_in, action="noop", step=0)
    assert "2. Cantidad de Bugs / Errores" in resp.text


def test_submit_records_review_and_shows_insight(logged_in, store, recorder, insights):
    resp = _post(logged_in, action="submit", step=4, completion=90, bugs=1,
                 satisfaction=5, comments="Buen sprint")

    assert "¡Recibido!" in resp.text
    assert "¡Excelente mes, sigue así!" in resp.text
    assert "La copia remota no pudo confirmarse" not in resp.text

    [review] = store.list_reviews()
    assert (review.identity, review.completion_percent, review.bug_count) == ("dev@sooft.com", 90, 1)
    assert review.comments == "Buen sprint"
    recorder.append.assert_called_once_with(review)
    insights.request_insight.assert_called_once_with(90, 1, 5, "Buen sprint")

    resp = logged_in.get("/")
    assert "¡Misión Cumplida!" in resp.text


def test_submit_notes_when_remote_copy_failed(logged_in, recorder):
    recorder.append.return_value = False
    resp = _post(logged_in, action="submit", step=4, satisfaction=3)

    assert "¡Recibido!" in resp.text
    assert "La copia remota no pudo confirmarse" in resp.text


def test_post_after_completion_shows_already_done(logged_in, store, make_review):
    store.append_review(make_review())
    resp = _post(logged_in, action="submit", step=4, satisfaction=3)

    assert "¡Misión Cumplida!" in resp.text
    assert len(store.list_reviews()) == 1


def test_remote_record_blocks_entry(logged_in, recorder):
    recorder.check_exists.return_value = True
    resp = logged_in.get("/")
    assert "¡Misión Cumplida!" in resp.text


# ── Admin and export ───────────────────────────────────────────────

def test_admin_empty(client):
    resp = client.get("/admin")
    assert "No hay registros cargados." in resp.text
    assert "Total: 0 reportes" in resp.text
    assert "disabled" in resp.text


def test_admin_lists_newest_first(client, store, make_review):
    store.append_review(make_review(identity="first@sooft.com", comments="hola"))
    store.append_review(make_review(identity="second@sooft.com", satisfaction=1))

    text = client.get("/admin").text

    assert "Total: 2 reportes" in text
    assert text.index("second@sooft.com") < text.index("first@sooft.com")
    assert "😫" in text
    assert 'href="/admin/export.csv"' in text


def test_admin_shows_raw_level_for_unknown_satisfaction(client, store, make_review):
    store.append_review(make_review(satisfaction=9))

    resp = client.get("/admin")

    assert resp.status_code == 200
    assert '<td class="center">9</td>' in resp.text


def test_csv_download(client, store, make_review):
    store.append_review(make_review(comments="ok"))
    resp = client.get("/admin/export.csv")

    assert resp.headers["content-type"].startswith("text/csv")
    assert "Check-in_Reporte_" in resp.headers["content-disposition"]
    body = resp.content.decode("utf-8")
    assert body.startswith("\ufeffFecha;Email;Mes;Completitud %;Bugs;Satisfaccion;Comentarios")
    assert 'dev@sooft.com;octubre de 2026;80;1;Satisfecho;"ok"' in body


def test_api_reviews_omits_empty_comments(client, store, make_review):
    review = store.append_review(make_review(comments=None))[0]

    [item] = client.get("/api/reviews").json()

    assert item["id"] == review.id
    assert item["developerEmail"] == "dev@sooft.com"
    assert item["monthId"] == "2026-10"
    assert "comments" not in item


def test_api_status(client):
    body = client.get("/api/status").json()
    assert body["period"] == "2026-10"
    assert body["remote"] == "Google Apps Script is running"
    assert body["warnings"] == []
