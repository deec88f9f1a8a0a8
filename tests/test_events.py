from datetime import datetime, timedelta

import pytest_asyncio


def event_payload(**overrides):
    payload = {
        "title": "Cercle de parole",
        "description": "Rencontre mensuelle",
        "date": (datetime.utcnow() + timedelta(days=7)).isoformat(),
        "mode": "online",
        "location": "https://visio.example.com/cercle",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def event(client, instructor):
    response = await client.post("/api/events", headers=instructor["headers"], json=event_payload())
    assert response.status_code == 201, response.text
    return response.json()


async def test_participant_cannot_create_event(client, alice):
    response = await client.post("/api/events", headers=alice["headers"], json=event_payload())
    assert response.status_code == 403


async def test_instructor_creates_event_as_speaker(event, instructor):
    assert event["instructor_id"] == instructor["user"]["id"]
    assert event["instructor_first_name"] == "Ines"
    assert event["registrations"] == []
    assert event["registration_count"] == 0


async def test_admin_assigns_instructor(client, admin, instructor):
    response = await client.post(
        "/api/events",
        headers=admin["headers"],
        json=event_payload(instructor_id=instructor["user"]["id"]),
    )
    assert response.status_code == 201
    assert response.json()["instructor_id"] == instructor["user"]["id"]

    unknown = await client.post("/api/events", headers=admin["headers"], json=event_payload(instructor_id=9999))
    assert unknown.status_code == 400


async def test_event_validation(client, instructor):
    bad_mode = await client.post("/api/events", headers=instructor["headers"], json=event_payload(mode="hybrid"))
    assert bad_mode.status_code == 422

    no_title = await client.post("/api/events", headers=instructor["headers"], json=event_payload(title=""))
    assert no_title.status_code == 422


async def test_timezone_aware_date_is_stored_as_utc(client, instructor):
    response = await client.post(
        "/api/events",
        headers=instructor["headers"],
        json=event_payload(date="2030-06-01T12:00:00+02:00"),
    )
    assert response.status_code == 201
    assert response.json()["date"].startswith("2030-06-01T10:00:00")


async def test_list_and_filter_events(client, instructor, alice):
    await client.post("/api/events", headers=instructor["headers"], json=event_payload(title="Futur"))
    await client.post(
        "/api/events",
        headers=instructor["headers"],
        json=event_payload(title="Passé", mode="in-person", date=(datetime.utcnow() - timedelta(days=3)).isoformat()),
    )

    all_events = (await client.get("/api/events", headers=alice["headers"])).json()
    assert [e["title"] for e in all_events] == ["Passé", "Futur"]

    upcoming = (await client.get("/api/events", headers=alice["headers"], params={"upcoming": True})).json()
    assert [e["title"] for e in upcoming] == ["Futur"]

    in_person = (await client.get("/api/events", headers=alice["headers"], params={"mode": "in-person"})).json()
    assert [e["title"] for e in in_person] == ["Passé"]


async def test_get_event_not_found(client, alice):
    assert (await client.get("/api/events/9999", headers=alice["headers"])).status_code == 404


async def test_update_event_permissions(client, event, instructor, register_user, set_role, admin):
    from leaders.auth.models import Role

    other = await register_user("other.instructor@example.com", "Otto")
    await set_role(other["user"]["id"], Role.INSTRUCTOR)

    forbidden = await client.put(f"/api/events/{event['id']}", headers=other["headers"], json={"title": "Piraté"})
    assert forbidden.status_code == 403

    own = await client.put(f"/api/events/{event['id']}", headers=instructor["headers"], json={"title": "Renommé"})
    assert own.status_code == 200
    assert own.json()["title"] == "Renommé"
    assert own.json()["mode"] == "online"

    by_admin = await client.put(
        f"/api/events/{event['id']}",
        headers=admin["headers"],
        json={"instructor_id": other["user"]["id"], "mode": "in-person"},
    )
    assert by_admin.status_code == 200
    assert by_admin.json()["instructor_id"] == other["user"]["id"]
    assert by_admin.json()["mode"] == "in-person"

    missing = await client.put("/api/events/9999", headers=admin["headers"], json={"title": "x"})
    assert missing.status_code == 404


async def test_registration_is_idempotent(client, event, alice, bob):
    url = f"/api/events/{event['id']}/register"
    first = await client.post(url, headers=alice["headers"])
    assert first.status_code == 200
    assert first.json()["registered"] is True
    await client.post(url, headers=alice["headers"])
    await client.post(url, headers=bob["headers"])

    detail = (await client.get(f"/api/events/{event['id']}", headers=alice["headers"])).json()
    assert detail["registration_count"] == 2
    assert detail["registrations"] == [alice["user"]["id"], bob["user"]["id"]]

    left = await client.delete(url, headers=alice["headers"])
    assert left.status_code == 200
    assert left.json()["registered"] is False

    detail = (await client.get(f"/api/events/{event['id']}", headers=alice["headers"])).json()
    assert detail["registrations"] == [bob["user"]["id"]]


async def test_register_unknown_event(client, alice):
    assert (await client.post("/api/events/9999/register", headers=alice["headers"])).status_code == 404


async def test_admin_unregisters_other_user(client, event, admin, alice, bob):
    url = f"/api/events/{event['id']}/register"
    await client.post(url, headers=bob["headers"])

    denied = await client.delete(url, headers=alice["headers"], params={"user_id": bob["user"]["id"]})
    assert denied.status_code == 403

    ok = await client.delete(url, headers=admin["headers"], params={"user_id": bob["user"]["id"]})
    assert ok.status_code == 200
    assert ok.json()["user_id"] == bob["user"]["id"]

    detail = (await client.get(f"/api/events/{event['id']}", headers=bob["headers"])).json()
    assert detail["registration_count"] == 0


async def test_delete_event_cascades_registrations(client, event, instructor, alice):
    await client.post(f"/api/events/{event['id']}/register", headers=alice["headers"])

    denied = await client.delete(f"/api/events/{event['id']}", headers=alice["headers"])
    assert denied.status_code == 403

    response = await client.delete(f"/api/events/{event['id']}", headers=instructor["headers"])
    assert response.status_code == 200
    assert (await client.get(f"/api/events/{event['id']}", headers=alice["headers"])).status_code == 404

    again = await client.delete(f"/api/events/{event['id']}", headers=instructor["headers"])
    assert again.status_code == 404


async def test_admin_clears_instructor_with_explicit_null(client, event, admin, instructor):
    # Un Instructeur ne peut pas se retirer de son propre événement
    by_instructor = await client.put(
        f"/api/events/{event['id']}", headers=instructor["headers"], json={"instructor_id": None}
    )
    assert by_instructor.status_code == 200
    assert by_instructor.json()["instructor_id"] == instructor["user"]["id"]

    untouched = await client.put(f"/api/events/{event['id']}", headers=admin["headers"], json={"title": "Sans changement"})
    assert untouched.json()["instructor_id"] == instructor["user"]["id"]

    cleared = await client.put(f"/api/events/{event['id']}", headers=admin["headers"], json={"instructor_id": None})
    assert cleared.status_code == 200
    assert cleared.json()["instructor_id"] is None
    assert cleared.json()["instructor_first_name"] is None
