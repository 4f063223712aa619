from __future__ import annotations

from urllib.parse import quote

from condstore.singleton import get_store


def test_healthcheck_and_info(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "condstore"


def test_set_get_add_erase_roundtrip(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    resp = client.get("/conditions/fuel")
    assert resp.status_code == 200
    assert resp.json() == {"key": "fuel", "has": False, "value": 0}

    resp_set = client.put("/conditions/fuel", json={"value": 5})
    assert resp_set.status_code == 200
    assert resp_set.json() == {"key": "fuel", "ok": True, "value": 5}

    resp_add = client.post("/conditions/fuel/add", json={"delta": -2})
    assert resp_add.json()["value"] == 3

    assert client.get("/conditions/fuel").json() == {"key": "fuel", "has": True, "value": 3}

    resp_del = client.delete("/conditions/fuel")
    assert resp_del.status_code == 200
    assert client.get("/conditions/fuel").json()["has"] is False


def test_keys_with_spaces_and_colons(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis
    get_store().register_prefix_provider("event: ").wire(get=lambda key: 42, has=lambda key: True)

    resp = client.get(f"/conditions/{quote('event: test')}")
    assert resp.json() == {"key": "event: test", "has": True, "value": 42}


def test_provider_rejection_maps_to_conflict(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis
    get_store().register_named_provider("locked").wire(
        get=lambda key: 1,
        has=lambda key: True,
        set=lambda key, value: False,
        erase=lambda key: False,
    )

    assert client.put("/conditions/locked", json={"value": 3}).status_code == 409
    assert client.post("/conditions/locked/add", json={"delta": 1}).status_code == 409
    assert client.delete("/conditions/locked").status_code == 409


def test_value_outside_int64_is_rejected(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    resp = client.put("/conditions/big", json={"value": 2**63})
    assert resp.status_code == 422


def test_primaries_listing_with_paging(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis
    store = get_store()
    for key, value in [("a", 1), ("b", 2), ("c", 3)]:
        store.set(key, value)
    store.register_named_provider("bb").wire(get=lambda key: 7)

    page1 = client.get("/conditions", params={"limit": 2}).json()
    assert page1["conditions"] == [{"key": "a", "value": 1}, {"key": "b", "value": 2}]
    assert page1["next_key"] == "c"

    page2 = client.get("/conditions", params={"lower_bound": page1["next_key"], "limit": 2}).json()
    assert page2 == {"conditions": [{"key": "c", "value": 3}], "next_key": None}


def test_records_save_and_load(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    resp = client.post("/records", json={"records": [{"key": "fuel"}, {"key": "kills", "value": 4}, {"key": "zero", "value": 0}]})
    assert resp.status_code == 200
    assert resp.json()["records"] == [{"key": "fuel", "value": None}, {"key": "kills", "value": 4}]

    assert get_store().get("fuel") == 1
    assert get_store().has("zero") is True


def test_snapshot_endpoints(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, r = client_and_redis
    store = get_store()
    store.set("fuel", 1)
    store.set("kills", 2)

    resp = client.put("/snapshots/slot1")
    assert resp.status_code == 200
    assert resp.json()["name"] == "slot1"
    assert r.get("condstore:snapshot:slot1") is not None

    listed = client.get("/snapshots").json()
    assert [s["name"] for s in listed["snapshots"]] == ["slot1"]

    store.clear()
    resp_restore = client.post("/snapshots/slot1/restore")
    assert resp_restore.status_code == 200
    assert store.get("kills") == 2

    assert client.post("/snapshots/missing/restore").status_code == 404


def test_loaded_record_outside_int64_is_rejected(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    resp = client.post("/records", json={"records": [{"key": "huge", "value": 2**70}]})
    assert resp.status_code == 422
    assert get_store().has("huge") is False

    # Bare records (value defaults to 1) still load.
    assert client.post("/records", json={"records": [{"key": "flag"}]}).status_code == 200
    assert get_store().get("flag") == 1


def test_add_past_int64_range_is_rejected(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis
    get_store().set("x", 2**63 - 1)
    get_store().set("y", -(2**63))

    assert client.post("/conditions/x/add", json={"delta": 1}).status_code == 422
    assert client.post("/conditions/y/add", json={"delta": -1}).status_code == 422
    assert get_store().get("x") == 2**63 - 1
    assert get_store().get("y") == -(2**63)

    resp = client.post("/conditions/x/add", json={"delta": -1})
    assert resp.json()["value"] == 2**63 - 2
