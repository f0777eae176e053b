from fastapi.testclient import TestClient

PEER = {
    ".id": "*A",
    "name": "laptop",
    "interface": "wg0",
    "public-key": "PKEY",
    "allowed-address": "10.0.0.5/32",
    "endpoint-address": "vpn.example.com",
}


def _save_profile(client: TestClient, **overrides):
    payload = {
        "routerType": "mikrotik",
        "endpoint": "192.0.2.1",
        "port": "80",
        "user": "admin",
        "password": "secret",
        "useHttps": False,
    }
    payload.update(overrides)
    return client.put("/api/console/profile", json=payload)


def test_profile_round_trip(client: TestClient):
    assert client.get("/api/console/profile").json() == {
        "configured": False,
        "routerType": None,
        "endpoint": None,
        "port": None,
        "user": None,
        "useHttps": None,
        "has_password": False,
    }

    response = _save_profile(client, port=443, useHttps=True)
    assert response.status_code == 200

    data = client.get("/api/console/profile").json()
    assert data["configured"] is True
    assert data["port"] == "443"
    assert data["useHttps"] is True
    assert data["has_password"] is True
    # Password is never returned
    assert "password" not in data


def test_profile_keeps_password_when_omitted(client: TestClient, console):
    _save_profile(client)
    payload = {"routerType": "mikrotik", "endpoint": "198.51.100.1", "user": "admin"}
    assert client.put("/api/console/profile", json=payload).status_code == 200
    assert console.store.load().password == "secret"
    assert console.store.load().endpoint == "198.51.100.1"


def test_profile_delete(client: TestClient):
    _save_profile(client)
    assert client.delete("/api/console/profile").json() == {"ok": True, "deleted": True}
    assert client.get("/api/console/profile").json()["configured"] is False


def test_profile_import_from_backend(client: TestClient, fake_backend):
    fake_backend.reply({"routerType": "mikrotik", "endpoint": "203.0.113.7", "port": "8080", "user": "api", "password": "pw"})
    response = client.post("/api/console/profile/import")
    assert response.status_code == 200
    assert response.json()["endpoint"] == "203.0.113.7"
    assert str(fake_backend.requests[0].url) == "http://proxy.test/api/config/router"


def test_profile_import_backend_error(client: TestClient, fake_backend):
    fake_backend.reply({"error": "not found"}, http_status=404)
    response = client.post("/api/console/profile/import")
    assert response.status_code == 502
    assert "not found" in response.json()["detail"]


def test_profile_import_invalid_config(client: TestClient, fake_backend):
    fake_backend.reply({"endpoint": "10.1.1.1", "user": None, "password": "x"})
    response = client.post("/api/console/profile/import")
    assert response.status_code == 502
    assert "invalid router configuration" in response.json()["detail"]
    assert client.get("/api/console/profile").json()["configured"] is False


def test_interfaces_without_profile(client: TestClient, fake_proxy):
    data = client.get("/api/console/interfaces").json()
    assert data["interfaces"] == []
    assert data["is_loading"] is False
    assert data["notifications"][0]["title"] == "Configuration not found"
    assert fake_proxy.calls == []


def test_interfaces_listing(client: TestClient, fake_proxy):
    _save_profile(client)
    rows = [{".id": "*1", "name": "wg0", "disabled": "false", "running": "true"}]
    fake_proxy.reply({"success": True, "status": 200, "data": rows})
    data = client.get("/api/console/interfaces").json()
    assert data["interfaces"] == rows
    assert data["stats"] == {"total": 1, "running": 1, "enabled": 1}
    assert data["notifications"] == []


def test_toggle_requires_confirmation(client: TestClient, fake_proxy):
    _save_profile(client)
    response = client.post("/api/console/interfaces/*1/toggle", params={"disabled": "false"})
    assert response.status_code == 409
    assert fake_proxy.calls == []


def test_delete_interface(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "status": 204})
    fake_proxy.reply({"success": True, "status": 200, "data": []})
    response = client.delete("/api/console/interfaces/*1", params={"name": "wg0", "confirm": "true"})
    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "succeeded"
    assert [n["title"] for n in body["notifications"]] == ["Interface deleted", "No interfaces found"]


def test_create_and_list_peers(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True})
    fake_proxy.reply({"success": True, "data": [PEER]})
    response = client.post("/api/console/peers", json={"interface": "wg0", "endpoint-address": "vpn.example.com"})
    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["peers"] == [PEER]

    body = fake_proxy.calls[0]["body"]
    assert len(body["public-key"]) == 44
    assert body["allowed-address"].startswith("10.0.0.")


def test_peer_config_download(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "data": [PEER]})
    response = client.get("/api/console/peers/*A/config")
    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="laptop.conf"'
    assert "Endpoint = vpn.example.com:51820" in response.text
    assert "PublicKey = PKEY" in response.text
    assert response.headers["x-peer-name"] == "laptop"


def test_peer_config_unknown_peer(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "data": []})
    assert client.get("/api/console/peers/*Z/config").status_code == 404


def test_peer_qrcode(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "data": [PEER]})
    response = client.get("/api/console/peers/*A/qrcode")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")
    assert response.headers["x-peer-name"] == "laptop"


def test_logs_record_proxied_calls(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "data": []})
    client.get("/api/console/peers")
    logs = client.get("/api/console/logs").json()
    assert len(logs) == 1
    assert logs[0]["method"] == "GET"
    assert logs[0]["path"] == "/rest/interface/wireguard/peers"
    assert logs[0]["status"] == 200

    assert client.delete("/api/console/logs").json() == {"ok": True}
    assert client.get("/api/console/logs").json() == []


def test_peer_name_header_is_sanitised(client: TestClient, fake_proxy):
    _save_profile(client)
    fake_proxy.reply({"success": True, "data": [{".id": "*C", "name": 'bad"name\r\nX-Evil: 1'}]})
    response = client.get("/api/console/peers/*C/config")
    assert response.status_code == 200
    assert response.headers["x-peer-name"] == "bad_name__X-Evil__1"
    assert "x-evil" not in response.headers


def test_clear_notifications(client: TestClient, fake_proxy):
    client.get("/api/console/interfaces")
    assert len(client.get("/api/console/notifications").json()) == 1
    assert client.delete("/api/console/notifications").json() == {"ok": True}
    assert client.get("/api/console/notifications").json() == []
