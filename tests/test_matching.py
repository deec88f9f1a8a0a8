from sqlalchemy import func, select


async def swipe(client, actor, target, action="like"):
    return await client.post(
        "/api/swipes",
        headers=actor["headers"],
        json={"swiped_id": target["user"]["id"], "action": action},
    )


async def test_one_sided_like_creates_no_match(client, alice, bob):
    response = await swipe(client, alice, bob)
    assert response.status_code == 200
    data = response.json()
    assert data["action"] == "like"
    assert data["match"] is False
    assert data["match_id"] is None

    assert (await client.get("/api/matches", headers=alice["headers"])).json() == []


async def test_mutual_like_creates_single_match(client, alice, bob):
    await swipe(client, alice, bob)
    response = await swipe(client, bob, alice)
    assert response.status_code == 200
    data = response.json()
    assert data["match"] is True
    assert data["match_id"] is not None

    alice_matches = (await client.get("/api/matches", headers=alice["headers"])).json()
    bob_matches = (await client.get("/api/matches", headers=bob["headers"])).json()
    assert len(alice_matches) == 1
    assert len(bob_matches) == 1
    assert alice_matches[0]["id"] == bob_matches[0]["id"] == data["match_id"]
    assert alice_matches[0]["matched_user_id"] == bob["user"]["id"]
    assert alice_matches[0]["first_name"] == "Bob"
    assert bob_matches[0]["matched_user_id"] == alice["user"]["id"]


async def test_pass_never_matches(client, alice, bob):
    await swipe(client, alice, bob, "pass")
    response = await swipe(client, bob, alice, "like")
    assert response.json()["match"] is False
    assert (await client.get("/api/matches", headers=bob["headers"])).json() == []


async def test_duplicate_swipe_is_rejected(client, alice, bob):
    assert (await swipe(client, alice, bob, "pass")).status_code == 200
    again = await swipe(client, alice, bob, "like")
    assert again.status_code == 400


async def test_invalid_swipes(client, alice, bob):
    self_swipe = await swipe(client, alice, alice)
    assert self_swipe.status_code == 400

    bad_action = await swipe(client, alice, bob, "superlike")
    assert bad_action.status_code == 400

    missing_target = await client.post("/api/swipes", headers=alice["headers"], json={"action": "like"})
    assert missing_target.status_code == 400

    unknown_user = await client.post(
        "/api/swipes", headers=alice["headers"], json={"swiped_id": 9999, "action": "like"}
    )
    assert unknown_user.status_code == 404


async def test_matches_newest_first(client, alice, bob, carol):
    await swipe(client, bob, alice)
    await swipe(client, alice, bob)
    await swipe(client, carol, alice)
    await swipe(client, alice, carol)

    matches = (await client.get("/api/matches", headers=alice["headers"])).json()
    assert [m["matched_user_id"] for m in matches] == [carol["user"]["id"], bob["user"]["id"]]


async def test_swipe_requires_authentication(client, bob):
    response = await client.post("/api/swipes", json={"swiped_id": bob["user"]["id"], "action": "like"})
    assert response.status_code == 401


async def test_concurrent_duplicate_swipe_rejected_by_constraint(client, alice, bob, session_factory, monkeypatch):
    from leaders.matching.models import Swipe
    from leaders.matching.services import MatchingService

    # Swipe concurrent déjà en base quand la vérification est passée
    async with session_factory() as session:
        session.add(Swipe(swiper_id=alice["user"]["id"], swiped_id=bob["user"]["id"], action="pass"))
        await session.commit()

    async def no_existing_swipe(self, *args, **kwargs):
        return None

    monkeypatch.setattr(MatchingService, "_get_swipe", no_existing_swipe)

    response = await swipe(client, alice, bob, "like")
    assert response.status_code == 400

    async with session_factory() as session:
        count = (await session.execute(select(func.count(Swipe.id)))).scalar_one()
    assert count == 1


async def test_concurrent_match_creation_returns_existing_match(client, alice, bob, session_factory, monkeypatch):
    from leaders.matching.models import Match
    from leaders.matching.services import MatchingService, ordered_pair

    await swipe(client, bob, alice)

    # Match créé par une requête concurrente
    user_a_id, user_b_id = ordered_pair(alice["user"]["id"], bob["user"]["id"])
    async with session_factory() as session:
        existing = Match(user_a_id=user_a_id, user_b_id=user_b_id)
        session.add(existing)
        await session.commit()
        existing_id = existing.id

    real_get_match = MatchingService.get_match
    calls = []

    async def missed_first_lookup(self, user_id, other_id):
        calls.append((user_id, other_id))
        if len(calls) == 1:
            return None
        return await real_get_match(self, user_id, other_id)

    monkeypatch.setattr(MatchingService, "get_match", missed_first_lookup)

    response = await swipe(client, alice, bob)
    assert response.status_code == 200
    assert response.json()["match"] is True
    assert response.json()["match_id"] == existing_id
    assert len(calls) == 2

    async with session_factory() as session:
        count = (await session.execute(select(func.count(Match.id)))).scalar_one()
    assert count == 1
