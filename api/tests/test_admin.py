import pytest
from fastapi import HTTPException

from admin import service

CSV_TEXT = (
    "performer,genre,songTitle,words,language,era,classic\n"
    "Nirvana,Grunge,Smells Like Teen Spirit,Here we are now,en,1991,false\n"
    "nirvana,,Lithium,I'm so happy,en,1992,\n"
    "Abba,Pop,Waterloo,My my,en,1974,TRUE\n"
)


def test_admin_requires_bearer_token(client):
    assert client.post("/api/admin/reset").status_code == 401

    malformed = client.post("/api/admin/reset", headers={"Authorization": "Token abc"})
    assert malformed.status_code == 401

    wrong = client.post("/api/admin/reset", headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 403
    assert wrong.json() == {"error": "Invalid admin token."}


def test_admin_disabled_without_configured_token(client_factory, admin_headers):
    client = client_factory(admin_token=None)

    response = client.post("/api/admin/seed", headers=admin_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin endpoints are disabled."}


def test_import_creates_performers_once(client, admin_headers):
    response = client.post("/api/admin/import", content=CSV_TEXT.encode(), headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"performers": 2, "lyrics": 3}

    performers = client.get("/api/performers").json()
    assert [p["name"] for p in performers] == ["Abba", "Nirvana"]

    lyrics = client.get("/api/lyrics", params={"text": "waterloo"}).json()
    assert lyrics[0]["classic"] is True
    assert lyrics[0]["era"] == "1974"
    lithium = client.get("/api/lyrics", params={"text": "lithium"}).json()[0]
    assert lithium["classic"] is None


def test_import_with_custom_delimiter(client, admin_headers):
    text = "performer;songTitle;words;language\nNirvana;Lithium;I'm so happy;en\n"

    response = client.post(
        "/api/admin/import",
        params={"delimiter": ";"},
        content=text.encode(),
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"performers": 1, "lyrics": 1}


def test_invalid_row_rejects_whole_import(client, admin_headers):
    text = CSV_TEXT + "Abba,Pop,Dancing Queen,,en,1976,\n"

    response = client.post("/api/admin/import", content=text.encode(), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Line 5: words")

    assert client.get("/api/performers").json() == []
    assert client.get("/api/lyrics").json() == []


def test_import_rejects_non_utf8(client, admin_headers):
    response = client.post("/api/admin/import", content=b"\xff\xfe\x00bad", headers=admin_headers)
    assert response.status_code == 400


def test_reset_and_seed(client, admin_headers):
    client.post("/api/admin/import", content=CSV_TEXT.encode(), headers=admin_headers)

    reset = client.post("/api/admin/reset", headers=admin_headers)
    assert reset.status_code == 200
    assert reset.json() == {"ok": True}
    assert client.get("/api/lyrics").json() == []
    assert client.get("/api/performers").json() == []

    seeded = client.post("/api/admin/seed", headers=admin_headers).json()
    assert seeded["lyrics"] > 0
    assert seeded["performers"] > 0

    # Seeding twice adds nothing.
    assert client.post("/api/admin/seed", headers=admin_headers).json() == {"performers": 0, "lyrics": 0}


def test_seed_on_basic_profile(client_factory, admin_headers):
    client = client_factory("basic")

    response = client.post("/api/admin/seed", headers=admin_headers)
    assert response.status_code == 200
    assert all("genre" not in p for p in client.get("/api/performers").json())


def test_parse_import_header_must_name_required_columns():
    with pytest.raises(HTTPException) as exc_info:
        service.parse_import("performer,songTitle\nNirvana,Lithium\n")
    assert exc_info.value.status_code == 400
    assert "language" in exc_info.value.detail
    assert "words" in exc_info.value.detail


@pytest.mark.parametrize("text", ["", "   \n", "performer,songTitle,words,language\n"])
def test_parse_import_rejects_empty_payloads(text):
    with pytest.raises(HTTPException) as exc_info:
        service.parse_import(text)
    assert exc_info.value.status_code == 400


def test_parse_import_normalizes_rows():
    rows = service.parse_import(" performer , songTitle,words,language\n  Nirvana ,Lithium , happy ,en\n")

    assert len(rows) == 1
    assert rows[0].performer == "Nirvana"
    assert rows[0].song_title == "Lithium"
    assert rows[0].words == "happy"
