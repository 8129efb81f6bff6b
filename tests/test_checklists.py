import pytest

from conftest import BOARD_ID, CARD_ID, USER


def checklist_body(**fields):
    return {"name": "Due diligence", "owner": USER, "boardId": BOARD_ID, "cardId": CARD_ID, **fields}


def count_checklists(client, auth):
    return client.get(f"/v1/checklists?cardId={CARD_ID}", headers=auth).json()["totalResults"]


def test_create_checklist_defaults(client, auth):
    res = client.post("/v1/checklists", json=checklist_body(), headers=auth)
    assert res.status_code == 201
    checklist = res.json()
    assert checklist["global"] is False
    assert checklist["rating"] is None
    assert checklist["columnPosition"] is None
    assert checklist["cardId"] == CARD_ID


def test_create_checklist_with_all_fields(client, auth):
    body = checklist_body(**{"global": True, "rating": "very good", "columnPosition": 0})
    checklist = client.post("/v1/checklists", json=body, headers=auth).json()
    fetched = client.get(f"/v1/checklists/{checklist['id']}", headers=auth).json()
    assert fetched["global"] is True
    assert fetched["rating"] == "very good"
    assert fetched["columnPosition"] == 0


@pytest.mark.parametrize(
    "fields",
    [
        {"rating": "excellent"},
        {"columnPosition": -1},
        {"cardId": "905ac"},
        {"owner": None},
        {"name": "   "},
    ],
)
def test_create_checklist_rejects_invalid_input(client, auth, fields):
    res = client.post("/v1/checklists", json=checklist_body(**fields), headers=auth)
    assert res.status_code == 400
    assert res.json()["code"] == "validation_error"
    assert count_checklists(client, auth) == 0


def test_checklist_names_are_unique_per_card(client, auth):
    client.post("/v1/checklists", json=checklist_body(), headers=auth)
    res = client.post("/v1/checklists", json=checklist_body(), headers=auth)
    assert res.status_code == 400
    assert res.json()["code"] == "conflict"
    assert count_checklists(client, auth) == 1


def test_update_checklist_rating(client, auth):
    checklist = client.post("/v1/checklists", json=checklist_body(columnPosition=3), headers=auth).json()
    res = client.patch(f"/v1/checklists/{checklist['id']}", json={"rating": "poor"}, headers=auth)
    assert res.status_code == 200
    assert res.json()["rating"] == "poor"
    assert res.json()["columnPosition"] == 3

    res = client.patch(f"/v1/checklists/{checklist['id']}", json={"rating": "excellent"}, headers=auth)
    assert res.status_code == 400


def test_list_checklists_sorted_by_position(client, auth):
    for name, position in (("b", 2), ("a", 0), ("c", 1)):
        client.post("/v1/checklists", json=checklist_body(name=name, columnPosition=position), headers=auth)
    res = client.get(f"/v1/checklists?cardId={CARD_ID}&sortBy=columnPosition:asc", headers=auth)
    assert [c["name"] for c in res.json()["results"]] == ["a", "c", "b"]


def test_delete_checklist(client, auth):
    checklist = client.post("/v1/checklists", json=checklist_body(), headers=auth).json()
    assert client.delete(f"/v1/checklists/{checklist['id']}", headers=auth).status_code == 204
    assert client.get(f"/v1/checklists/{checklist['id']}", headers=auth).status_code == 404
