def test_put_and_get_clip(client):
    response = client.put("/clips/4321", json={"text": "v=0 offer", "ttl_seconds": 120})
    assert response.status_code == 200
    assert response.json()["code"] == "4321"

    response = client.get("/clips/4321")
    assert response.status_code == 200
    body = response.json()
    assert body["text"] == "v=0 offer"
    assert 0 < body["ttl_seconds"] <= 120


def test_default_ttl_applied(client, fake_redis):
    client.put("/clips/4321", json={"text": "blob"})

    assert 0 < fake_redis.ttl("clip:4321") <= 600


def test_create_clip_generates_code(client):
    response = client.post("/clips/", json={"text": "candidate"})

    assert response.status_code == 201
    code = response.json()["code"]
    assert len(code) == 6 and code.isdigit()
    assert client.get(f"/clips/{code}").json()["text"] == "candidate"


def test_missing_clip(client):
    assert client.get("/clips/0000").status_code == 404


def test_delete_clip_is_idempotent(client):
    client.put("/clips/4321", json={"text": "blob"})

    assert client.delete("/clips/4321").status_code == 204
    assert client.delete("/clips/4321").status_code == 204
    assert client.get("/clips/4321").status_code == 404


def test_invalid_clip_code(client):
    assert client.put("/clips/12", json={"text": "blob"}).status_code == 422


def test_clip_validation(client):
    assert client.put("/clips/4321", json={"text": ""}).status_code == 422
    assert client.put("/clips/4321", json={"text": "x", "ttl_seconds": 0}).status_code == 422
    assert client.put("/clips/4321", json={"text": "x", "ttl_seconds": 10**6}).status_code == 422


def test_clips_do_not_touch_rooms(client):
    client.put("/clips/1234", json={"text": "blob"})

    assert client.registry.room_count == 0


def test_put_clip_when_store_is_down(offline_client):
    response = offline_client.put("/clips/4321", json={"text": "blob"})

    assert response.status_code == 503
    assert response.json() == {"detail": "Clip store unavailable"}


def test_create_clip_when_store_is_down(offline_client):
    response = offline_client.post("/clips/", json={"text": "blob"})

    assert response.status_code == 503
    assert response.json() == {"detail": "Clip store unavailable"}


def test_get_and_delete_clip_when_store_is_down(offline_client):
    assert offline_client.get("/clips/4321").status_code == 503
    assert offline_client.delete("/clips/4321").status_code == 503
