"""WebSocket tests for the display and control channels."""

from fastapi.testclient import TestClient


def _upload(client: TestClient, data: bytes, name: str = "photo.jpg") -> dict:
    response = client.post("/api/upload", files={"image": (name, data, "image/jpeg")})
    assert response.status_code == 200
    return response.json()["image"]


def test_display_receives_catalog_on_connect(client: TestClient, encode_image) -> None:
    image = _upload(client, encode_image())

    with client.websocket_connect("/ws/display") as display:
        message = display.receive_json()

    assert message["type"] == "images-list"
    assert [img["id"] for img in message["images"]] == [image["id"]]
    assert message["images"][0]["originalName"] == "photo.jpg"


def test_upload_is_broadcast_once(client: TestClient, encode_image) -> None:
    with client.websocket_connect("/ws/display") as display, client.websocket_connect(
        "/ws/control"
    ) as control:
        assert display.receive_json() == {"type": "images-list", "images": []}
        control.receive_json()

        image = _upload(client, encode_image())
        assert display.receive_json() == {"type": "image-uploaded", "image": image}

        # The next frame is the navigation, so no duplicate upload event was queued
        control.send_json({"type": "navigate", "slideIndex": 1})
        assert display.receive_json() == {"type": "navigate-to", "slideIndex": 1}


def test_update_and_delete_are_broadcast(client: TestClient, encode_image) -> None:
    image = _upload(client, encode_image())

    with client.websocket_connect("/ws/display") as display:
        display.receive_json()

        client.put(f"/api/images/{image['id']}", json={"title": "Opening hours"})
        updated = display.receive_json()
        assert updated["type"] == "image-updated"
        assert updated["image"]["title"] == "Opening hours"

        client.delete(f"/api/images/{image['id']}")
        assert display.receive_json() == {"type": "image-deleted", "imageId": image["id"]}


def test_navigate_reaches_both_displays(client: TestClient) -> None:
    with client.websocket_connect("/ws/display") as first, client.websocket_connect(
        "/ws/display"
    ) as second, client.websocket_connect("/ws/control") as control:
        first.receive_json()
        second.receive_json()
        assert control.receive_json() == {"type": "current-slide", "slideIndex": 0}

        control.send_json({"type": "navigate", "slideIndex": 3})

        assert first.receive_json() == {"type": "navigate-to", "slideIndex": 3}
        assert second.receive_json() == {"type": "navigate-to", "slideIndex": 3}


def test_display_state_reaches_control(client: TestClient) -> None:
    with client.websocket_connect("/ws/display") as display, client.websocket_connect(
        "/ws/control"
    ) as control:
        display.receive_json()
        control.receive_json()

        display.send_json({"type": "slide-changed", "slideIndex": 2})
        assert control.receive_json() == {"type": "current-slide", "slideIndex": 2}

        display.send_json({"type": "play-state", "isPlaying": False})
        assert control.receive_json() == {"type": "play-state", "isPlaying": False}

        with client.websocket_connect("/ws/control") as late:
            assert late.receive_json() == {"type": "current-slide", "slideIndex": 2}
            assert late.receive_json() == {"type": "play-state", "isPlaying": False}


def test_control_can_request_images(client: TestClient, encode_image) -> None:
    image = _upload(client, encode_image())

    with client.websocket_connect("/ws/control") as control:
        control.receive_json()
        control.send_text("garbage that is not json")
        control.send_json({"type": "request-images"})

        message = control.receive_json()

    assert message["type"] == "images-list"
    assert [img["id"] for img in message["images"]] == [image["id"]]


def test_disconnected_clients_are_unregistered(client: TestClient) -> None:
    with client.websocket_connect("/ws/display") as display:
        display.receive_json()
        # Round trip through the control channel so the server has registered the display
        with client.websocket_connect("/ws/control") as control:
            control.receive_json()
            assert client.get("/api/system").json()["clients"] == {"display": 1, "control": 1}

    assert client.app.state.hub.display.snapshot() == []


def test_snapshot_matches_rest_listing(client: TestClient, encode_image) -> None:
    _upload(client, encode_image())
    client.put(f"/api/images/{client.get('/api/images').json()[0]['id']}", json={"order": 5})
    listed = client.get("/api/images").json()

    with client.websocket_connect("/ws/display") as display:
        message = display.receive_json()

    assert message == {"type": "images-list", "images": listed}
    assert listed[0]["uploadedAt"].endswith("Z")
    assert listed[0]["updatedAt"].endswith("Z")


def test_invalid_slide_index_is_ignored(client: TestClient) -> None:
    with client.websocket_connect("/ws/display") as display, client.websocket_connect(
        "/ws/control"
    ) as control:
        display.receive_json()
        control.receive_json()

        display.send_json({"type": "slide-changed", "slideIndex": None})
        display.send_json({"type": "slide-changed", "slideIndex": "two"})
        display.send_json({"type": "slide-changed", "slideIndex": 1})

        assert control.receive_json() == {"type": "current-slide", "slideIndex": 1}
        response = client.get("/api/system")
        assert response.status_code == 200
        assert response.json()["currentSlide"] == 1


def test_binary_frames_are_skipped(client: TestClient) -> None:
    with client.websocket_connect("/ws/control") as control:
        control.receive_json()
        control.send_bytes(b"\x00\x01")
        control.send_json({"type": "request-images"})

        assert control.receive_json() == {"type": "images-list", "images": []}

    with client.websocket_connect("/ws/display") as display:
        display.receive_json()
        display.send_bytes(b"\xff")
        display.send_json({"type": "request-images"})

        assert display.receive_json() == {"type": "images-list", "images": []}
