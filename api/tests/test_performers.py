def _create_performer(client, name, genre=None):
    body = {"name": name}
    if genre is not None:
        body["genre"] = genre
    return client.post("/api/performers", json=body)


def _create_lyric(client, performer_id, title="Song", words="Some words", language="en"):
    response = client.post(
        "/api/lyrics",
        json={"performerId": performer_id, "songTitle": title, "words": words, "language": language},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_performer(client):
    response = _create_performer(client, "Nirvana", "Grunge")
    assert response.status_code == 201
    created = response.json()
    assert created == {"performerId": created["performerId"], "name": "Nirvana", "genre": "Grunge"}

    fetched = client.get(f"/api/performers/{created['performerId']}")
    assert fetched.status_code == 200
    assert fetched.json() == created
    assert fetched.headers["cache-control"] == "no-store"


def test_name_is_trimmed_and_limit_is_inclusive(client):
    response = _create_performer(client, "  " + "x" * 100 + "  ")
    assert response.status_code == 201
    assert response.json()["name"] == "x" * 100


def test_invalid_names_are_rejected_without_writing(client):
    for name in ["", "   ", "x" * 101]:
        response = _create_performer(client, name)
        assert response.status_code == 400
        assert "error" in response.json()

    assert client.get("/api/performers").json() == []


def test_missing_body_is_bad_request(client):
    response = client.post("/api/performers")
    assert response.status_code == 400


def test_list_is_alphabetical_case_insensitive(client):
    for name in ["beatles", "Abba", "Coldplay"]:
        _create_performer(client, name)

    names = [p["name"] for p in client.get("/api/performers").json()]
    assert names == ["Abba", "beatles", "Coldplay"]


def test_insert_or_fetch_returns_existing_row_with_200(client):
    first = _create_performer(client, "Nirvana", "Grunge")
    second = _create_performer(client, "Nirvana", "Rock")

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json() == first.json()
    assert len(client.get("/api/performers").json()) == 1


def test_upsert_policy_updates_existing_row(client_factory):
    client = client_factory(create_policy="upsert")

    first = _create_performer(client, "Nirvana", "Grunge")
    second = _create_performer(client, "Nirvana", "Rock")
    third = _create_performer(client, "Nirvana")

    assert first.status_code == second.status_code == third.status_code == 201
    assert second.json()["performerId"] == first.json()["performerId"]
    assert second.json()["genre"] == "Rock"
    # An omitted genre keeps the stored one.
    assert third.json()["genre"] == "Rock"


def test_get_performer_errors(client):
    assert client.get("/api/performers/999").status_code == 404
    assert client.get("/api/performers/abc").status_code == 400
    assert client.get("/api/performers/0").status_code == 400
    assert client.get("/api/performers/999").json() == {"error": "Performer not found."}


def test_update_performer(client):
    performer_id = _create_performer(client, "Nirvana", "Grunge").json()["performerId"]

    response = client.put(f"/api/performers/{performer_id}", json={"name": "Nirvana (US)", "genre": "Rock"})
    assert response.status_code == 200
    assert response.json() == {"performerId": performer_id, "name": "Nirvana (US)", "genre": "Rock"}

    # Replace semantics: an omitted genre is cleared.
    response = client.put(f"/api/performers/{performer_id}", json={"name": "Nirvana"})
    assert response.json()["genre"] is None


def test_update_performer_errors(client):
    a = _create_performer(client, "Abba").json()["performerId"]
    _create_performer(client, "Beatles")

    assert client.put("/api/performers/999", json={"name": "X"}).status_code == 404
    assert client.put(f"/api/performers/{a}", json={"name": " "}).status_code == 400
    conflict = client.put(f"/api/performers/{a}", json={"name": "Beatles"})
    assert conflict.status_code == 409


def test_updates_can_be_disabled(client_factory):
    client = client_factory(performer_updates=False)
    performer_id = _create_performer(client, "Nirvana").json()["performerId"]

    response = client.put(f"/api/performers/{performer_id}", json={"name": "Other"})
    assert response.status_code == 405
    assert client.get(f"/api/performers/{performer_id}").json()["name"] == "Nirvana"


def test_delete_restricted_while_referenced(client):
    performer_id = _create_performer(client, "Nirvana").json()["performerId"]
    lyric = _create_lyric(client, performer_id)

    response = client.delete(f"/api/performers/{performer_id}")
    assert response.status_code == 409

    assert client.get(f"/api/performers/{performer_id}").status_code == 200
    assert client.get(f"/api/lyrics/{lyric['lyricId']}").status_code == 200


def test_delete_unreferenced_performer(client):
    performer_id = _create_performer(client, "Nirvana").json()["performerId"]

    response = client.delete(f"/api/performers/{performer_id}")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/performers/{performer_id}").status_code == 404
    assert client.delete(f"/api/performers/{performer_id}").status_code == 404


def test_cascade_policy_deletes_lyrics(client_factory):
    client = client_factory(delete_policy="cascade")
    performer_id = _create_performer(client, "Nirvana").json()["performerId"]
    lyric = _create_lyric(client, performer_id)

    assert client.delete(f"/api/performers/{performer_id}").status_code == 204
    assert client.get(f"/api/lyrics/{lyric['lyricId']}").status_code == 404


def test_basic_profile_has_no_genre(client_factory):
    client = client_factory("basic")

    response = _create_performer(client, "Nirvana", "Grunge")
    assert response.status_code == 201
    assert response.json() == {"performerId": response.json()["performerId"], "name": "Nirvana"}


def test_names_are_unique_ignoring_case(client):
    first = _create_performer(client, "Nirvana", "Grunge")
    again = _create_performer(client, "nirvana")
    accented = _create_performer(client, "Édith Piaf")
    accented_again = _create_performer(client, "ÉDITH PIAF")

    assert again.status_code == 200
    assert again.json() == first.json()
    assert accented_again.status_code == 200
    assert accented_again.json()["performerId"] == accented.json()["performerId"]
    assert len(client.get("/api/performers").json()) == 2


def test_upsert_matches_names_ignoring_case(client_factory):
    client = client_factory(create_policy="upsert")

    first = _create_performer(client, "Nirvana", "Grunge")
    second = _create_performer(client, "NIRVANA", "Rock")

    assert second.status_code == 201
    assert second.json() == {"performerId": first.json()["performerId"], "name": "Nirvana", "genre": "Rock"}
    assert len(client.get("/api/performers").json()) == 1


def test_rename_to_other_case_of_taken_name_conflicts(client):
    abba = _create_performer(client, "Abba").json()["performerId"]
    _create_performer(client, "Beatles")

    assert client.put(f"/api/performers/{abba}", json={"name": "BEATLES"}).status_code == 409
    # Changing the case of its own name is fine.
    assert client.put(f"/api/performers/{abba}", json={"name": "ABBA"}).status_code == 200
