from conftest import BOARD_ID, USER


def create_card(client, auth, **fields):
    body = {"name": "Coupons", "boardId": BOARD_ID, **fields}
    return client.post("/v1/cards", json=body, headers=auth)


def test_create_card(client, auth):
    res = create_card(
        client,
        auth,
        owner=USER,
        note="Check the schedule",
        links=["https://example.com/docs", "https://example.com/faq"],
    )
    assert res.status_code == 201
    card = res.json()
    assert card["boardId"] == BOARD_ID
    assert card["note"] == "Check the schedule"
    assert card["links"] == ["https://example.com/docs", "https://example.com/faq"]

    fetched = client.get(f"/v1/cards/{card['id']}", headers=auth).json()["card"]
    assert fetched == card


def test_card_requires_board(client, auth):
    res = client.post("/v1/cards", json={"name": "Coupons"}, headers=auth)
    assert res.status_code == 400


def test_card_rejects_bad_links(client, auth):
    assert create_card(client, auth, links=["not a url"]).status_code == 400


def test_card_names_are_unique_per_board(client, auth):
    assert create_card(client, auth).status_code == 201
    assert create_card(client, auth).status_code == 400
    assert create_card(client, auth, boardId="5ebac534954b54139806c201").status_code == 201

    res = client.get(f"/v1/cards?boardId={BOARD_ID}", headers=auth)
    assert res.json()["totalResults"] == 1


def test_get_card_with_checklists_and_todolists(client, auth):
    card = create_card(client, auth).json()
    client.post(
        "/v1/checklists",
        json={"name": "Due diligence", "owner": USER, "boardId": BOARD_ID, "cardId": card["id"]},
        headers=auth,
    )
    client.post("/v1/todolists", json={"name": "Further reading", "cardId": card["id"]}, headers=auth)
    client.post(
        "/v1/todolists", json={"name": "Elsewhere", "cardId": "905ac534954b54139806c3ff"}, headers=auth
    )

    res = client.get(f"/v1/cards/{card['id']}", headers=auth)
    assert res.status_code == 200
    body = res.json()
    assert [c["name"] for c in body["checklists"]] == ["Due diligence"]
    assert [t["name"] for t in body["toDoLists"]] == ["Further reading"]


def test_update_card_links_only(client, auth):
    card = create_card(client, auth, note="keep me").json()
    res = client.patch(f"/v1/cards/{card['id']}", json={"links": ["https://example.com/new"]}, headers=auth)
    assert res.status_code == 200
    updated = res.json()
    assert updated["links"] == ["https://example.com/new"]
    assert updated["note"] == "keep me"
    assert updated["name"] == "Coupons"


def test_update_card_rejects_null_board(client, auth):
    card = create_card(client, auth).json()
    res = client.patch(f"/v1/cards/{card['id']}", json={"boardId": None}, headers=auth)
    assert res.status_code == 400


def test_delete_card(client, auth):
    card = create_card(client, auth).json()
    assert client.delete(f"/v1/cards/{card['id']}", headers=auth).status_code == 204
    assert client.get(f"/v1/cards/{card['id']}", headers=auth).status_code == 404
    assert client.delete(f"/v1/cards/{card['id']}", headers=auth).status_code == 404


def test_links_are_stored_as_submitted(client, auth):
    links = ["https://example.com", "HTTPS://Example.com/A"]
    card = create_card(client, auth, links=links).json()
    assert card["links"] == links
    fetched = client.get(f"/v1/cards/{card['id']}", headers=auth).json()["card"]
    assert fetched["links"] == links

    res = client.patch(f"/v1/cards/{card['id']}", json={"links": ["http://example.org"]}, headers=auth)
    assert res.json()["links"] == ["http://example.org"]
