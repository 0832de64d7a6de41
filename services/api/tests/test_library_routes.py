def _add(client, movie_id, title="Test Movie", **extra):
    return client.post("/library", json={"movieId": movie_id, "title": title, **extra})


def test_add_list_remove_scenario(client):
    resp = _add(client, "tt001", year=2020)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["movieId"] == "tt001"
    assert body["data"]["type"] == "movie"
    assert body["data"]["audioReviewPath"] is None
    assert body["data"]["hasAudioReview"] is False
    assert "createdAt" in body["data"] and "updatedAt" in body["data"]

    listed = client.get("/library").json()
    assert listed["success"] is True
    assert [e["title"] for e in listed["data"]] == ["Test Movie"]
    assert listed["data"][0]["year"] == 2020

    dup = _add(client, "tt001")
    assert dup.status_code == 400
    assert dup.json()["success"] is False
    assert "already" in dup.json()["message"]

    removed = client.delete("/library/tt001")
    assert removed.status_code == 200
    assert removed.json()["success"] is True
    assert client.get("/library").json()["data"] == []

    again = client.delete("/library/tt001")
    assert again.status_code == 400
    assert again.json()["success"] is False


def test_missing_required_fields_is_400(client):
    resp = client.post("/library", json={"movieId": "tt001"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "title" in resp.json()["message"]

    blank = _add(client, "tt002", title="   ")
    assert blank.status_code == 400


def test_list_is_newest_first(client):
    for movie_id in ("A", "B", "C"):
        _add(client, movie_id)

    data = client.get("/library").json()["data"]
    assert [e["movieId"] for e in data] == ["C", "B", "A"]


def test_check(client):
    assert client.get("/library/tt001/check").json() == {"success": True, "isInLibrary": False}
    _add(client, "tt001")
    assert client.get("/library/tt001/check").json() == {"success": True, "isInLibrary": True}


def test_upload_and_stream_audio(client):
    _add(client, "tt001")

    up = client.put(
        "/library/tt001/audio",
        files={"file": ("tt001.m4a", b"recorded-review", "audio/m4a")},
    )
    assert up.status_code == 200
    assert up.json() == {"success": True, "audioPath": "uploads/audio_reviews/tt001.m4a"}

    got = client.get("/library/tt001/audio")
    assert got.status_code == 200
    assert got.content == b"recorded-review"
    assert got.headers["content-type"].startswith("audio/mp4")

    probe = client.head("/library/tt001/audio")
    assert probe.status_code == 200

    entry = client.get("/library").json()["data"][0]
    assert entry["audioReviewPath"] == "uploads/audio_reviews/tt001.m4a"
    assert entry["hasAudioReview"] is True


def test_reupload_overwrites(client):
    _add(client, "tt001")
    client.put("/library/tt001/audio", files={"file": ("a.mp3", b"first", "audio/mpeg")})
    client.put("/library/tt001/audio", files={"file": ("b.mp3", b"second", "audio/mpeg")})

    assert client.get("/library/tt001/audio").content == b"second"


def test_audio_not_found(client):
    assert client.get("/library/tt001/audio").status_code == 404
    assert client.head("/library/tt001/audio").status_code == 404

    _add(client, "tt001")
    resp = client.get("/library/tt001/audio")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_upload_for_unknown_movie_is_404(client, storage):
    resp = client.put(
        "/library/tt404/audio", files={"file": ("x.mp3", b"x", "audio/mpeg")}
    )
    assert resp.status_code == 404
    assert not storage.directory.exists()


def test_remove_deletes_uploaded_audio(client, storage):
    _add(client, "tt001")
    client.put("/library/tt001/audio", files={"file": ("a.mp3", b"first", "audio/mpeg")})
    assert (storage.directory / "tt001.mp3").exists()

    client.delete("/library/tt001")

    assert not (storage.directory / "tt001.mp3").exists()


def test_health_and_request_id(client):
    resp = client.get("/health", headers={"X-Request-Id": "abc"})
    assert resp.json() == {"status": "ok"}
    assert resp.headers["X-Request-Id"] == "abc"
