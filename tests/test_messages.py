import pytest_asyncio


@pytest_asyncio.fixture
async def matched(client, alice, bob):
    await client.post("/api/swipes", headers=alice["headers"], json={"swiped_id": bob["user"]["id"], "action": "like"})
    await client.post("/api/swipes", headers=bob["headers"], json={"swiped_id": alice["user"]["id"], "action": "like"})
    return alice, bob


async def send(client, sender, receiver, content):
    return await client.post(
        "/api/messages",
        headers=sender["headers"],
        json={"receiver_id": receiver["user"]["id"], "content": content},
    )


async def test_messaging_requires_match(client, alice, bob):
    response = await send(client, alice, bob, "Bonjour")
    assert response.status_code == 403

    history = await client.get(f"/api/messages/{bob['user']['id']}", headers=alice["headers"])
    assert history.status_code == 403


async def test_one_sided_like_does_not_unlock_messaging(client, alice, bob):
    await client.post("/api/swipes", headers=alice["headers"], json={"swiped_id": bob["user"]["id"], "action": "like"})
    assert (await send(client, alice, bob, "Bonjour")).status_code == 403


async def test_send_and_read_conversation(client, matched):
    alice, bob = matched
    first = await send(client, alice, bob, "  Bonjour Bob  ")
    assert first.status_code == 201
    assert first.json()["content"] == "Bonjour Bob"
    assert first.json()["first_name"] == "Alice"
    await send(client, bob, alice, "Bonjour Alice")
    await send(client, alice, bob, "Comment vas-tu ?")

    response = await client.get(f"/api/messages/{alice['user']['id']}", headers=bob["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["pages"] == 1
    assert [m["content"] for m in data["messages"]] == ["Bonjour Bob", "Bonjour Alice", "Comment vas-tu ?"]
    assert data["messages"][1]["sender_id"] == bob["user"]["id"]


async def test_conversation_pagination(client, matched):
    alice, bob = matched
    for i in range(5):
        await send(client, alice, bob, f"message {i}")

    response = await client.get(
        f"/api/messages/{bob['user']['id']}",
        headers=alice["headers"],
        params={"page": 2, "per_page": 2},
    )
    data = response.json()
    assert data["total"] == 5
    assert data["pages"] == 3
    assert [m["content"] for m in data["messages"]] == ["message 2", "message 3"]

    invalid = await client.get(
        f"/api/messages/{bob['user']['id']}", headers=alice["headers"], params={"page": 0}
    )
    assert invalid.status_code == 422


async def test_invalid_message(client, matched):
    alice, bob = matched
    assert (await send(client, alice, bob, "   ")).status_code == 400
    missing_receiver = await client.post("/api/messages", headers=alice["headers"], json={"content": "Salut"})
    assert missing_receiver.status_code == 400
    self_message = await client.post(
        "/api/messages", headers=alice["headers"], json={"receiver_id": alice["user"]["id"], "content": "Moi"}
    )
    assert self_message.status_code == 403


async def test_conversations_list_latest_first(client, matched, carol):
    alice, bob = matched
    await client.post("/api/swipes", headers=alice["headers"], json={"swiped_id": carol["user"]["id"], "action": "like"})
    await client.post("/api/swipes", headers=carol["headers"], json={"swiped_id": alice["user"]["id"], "action": "like"})

    await send(client, alice, bob, "Salut Bob")
    await send(client, carol, alice, "Salut Alice, c'est Carol")
    await send(client, bob, alice, "Re Alice")

    response = await client.get("/api/messages/conversations", headers=alice["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    conversations = data["conversations"]
    assert [c["other_user_id"] for c in conversations] == [bob["user"]["id"], carol["user"]["id"]]
    assert conversations[0]["last_message"] == "Re Alice"
    assert conversations[0]["first_name"] == "Bob"
    assert conversations[1]["last_message"] == "Salut Alice, c'est Carol"

    empty = await client.get("/api/messages/conversations", headers=carol["headers"], params={"page": 2})
    assert empty.json()["conversations"] == []
    assert empty.json()["total"] == 1


async def test_conversations_are_paginated_per_correspondent(client, matched, carol):
    alice, bob = matched
    await client.post("/api/swipes", headers=alice["headers"], json={"swiped_id": carol["user"]["id"], "action": "like"})
    await client.post("/api/swipes", headers=carol["headers"], json={"swiped_id": alice["user"]["id"], "action": "like"})

    for i in range(3):
        await send(client, alice, carol, f"carol {i}")
    for i in range(3):
        await send(client, bob, alice, f"bob {i}")

    first = (await client.get("/api/messages/conversations", headers=alice["headers"], params={"per_page": 1})).json()
    assert first["total"] == 2
    assert first["pages"] == 2
    assert [(c["other_user_id"], c["last_message"]) for c in first["conversations"]] == [(bob["user"]["id"], "bob 2")]

    second = (await client.get(
        "/api/messages/conversations", headers=alice["headers"], params={"page": 2, "per_page": 1}
    )).json()
    assert [(c["other_user_id"], c["last_message"]) for c in second["conversations"]] == [(carol["user"]["id"], "carol 2")]
