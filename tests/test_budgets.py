def _budget(client, auth, **overrides):
    data = {"category": "food", "title": "Food", "amount": 200}
    data.update(overrides)
    resp = client.post("/api/budgets", json=data, headers=auth)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_derives_percentage(client, auth):
    budget = _budget(client, auth, spent=50)
    assert budget["percentageUsed"] == 25.0
    assert budget["title"] == "Food"


def test_create_with_zero_amount(client, auth):
    budget = _budget(client, auth, amount=0, spent=10)
    assert budget["percentageUsed"] == 0.0


def test_name_is_accepted_as_title(client, auth):
    budget = _budget(client, auth, title=None, name="Eating out")
    assert budget["title"] == "Eating out"


def test_create_missing_fields(client, auth):
    resp = client.post("/api/budgets", json={"category": "food"}, headers=auth)
    assert resp.status_code == 400
    assert "title" in resp.get_json()["error"]


def test_update_recomputes_percentage(client, auth):
    budget = _budget(client, auth, spent=50)
    resp = client.put(f"/api/budgets/{budget['id']}", json={"spent": 300}, headers=auth)
    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["percentageUsed"] == 150.0
    assert updated["amount"] == 200.0


def test_percentage_used_is_not_client_settable(client, auth):
    budget = _budget(client, auth, spent=50, percentageUsed=99)
    assert budget["percentageUsed"] == 25.0
    updated = client.put(f"/api/budgets/{budget['id']}", json={"percentageUsed": 1}, headers=auth).get_json()
    assert updated["percentageUsed"] == 25.0


def test_by_category_is_paginated_and_case_insensitive(client, auth, other_auth):
    for i in range(3):
        _budget(client, auth, category="Food" if i % 2 else "food", title=f"b{i}")
    _budget(client, auth, category="rent", title="rent")
    _budget(client, other_auth, category="food", title="bob")

    resp = client.get("/api/budgets/category/FOOD?page=0&size=2", headers=auth)
    assert resp.status_code == 200
    page = resp.get_json()
    assert page["total"] == 3
    assert [b["title"] for b in page["items"]] == ["b0", "b1"]

    page = client.get("/api/budgets/category/food?page=1&size=2", headers=auth).get_json()
    assert [b["title"] for b in page["items"]] == ["b2"]


def test_by_category_bad_pagination(client, auth):
    resp = client.get("/api/budgets/category/food?size=0", headers=auth)
    assert resp.status_code == 400
    resp = client.get("/api/budgets/category/food?page=99999999999999999999&size=10", headers=auth)
    assert resp.status_code == 400


def test_by_date_range(client, auth):
    _budget(client, auth, title="march", createdAt="2024-03-10")
    _budget(client, auth, title="april", createdAt="2024-04-02")
    _budget(client, auth, title="may", createdAt="2024-05-20")

    resp = client.get("/api/budgets/date-range?startDate=2024-03-01&endDate=2024-04-30", headers=auth)
    assert resp.status_code == 200
    page = resp.get_json()
    assert page["total"] == 2
    assert [b["title"] for b in page["items"]] == ["march", "april"]


def test_by_date_range_validation(client, auth):
    assert client.get("/api/budgets/date-range?startDate=2024-03-01", headers=auth).status_code == 400
    resp = client.get("/api/budgets/date-range?startDate=2024-05-01&endDate=2024-04-01", headers=auth)
    assert resp.status_code == 400


def test_bad_created_at(client, auth):
    resp = client.post("/api/budgets", json={
        "category": "food", "title": "x", "amount": 1, "createdAt": "soon"
    }, headers=auth)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid createdAt format"


def test_delete_budget(client, auth):
    budget = _budget(client, auth)
    resp = client.delete(f"/api/budgets/{budget['id']}", headers=auth)
    assert resp.get_json()["message"] == "Budget deleted successfully"
    assert client.get(f"/api/budgets/{budget['id']}", headers=auth).status_code == 404


def test_delete_missing_budget(client, auth):
    assert client.delete("/api/budgets/9999", headers=auth).status_code == 404


def test_percentage_too_large_to_store(client, auth):
    resp = client.post("/api/budgets", json={
        "category": "food", "title": "Tiny", "amount": 1e-310, "spent": 1
    }, headers=auth)
    assert resp.status_code == 400
    assert client.get("/api/budgets", headers=auth).get_json() == []


def test_update_with_name_renames(client, auth):
    budget = _budget(client, auth)
    resp = client.put(f"/api/budgets/{budget['id']}", json={"name": "Eating in"}, headers=auth)
    assert resp.status_code == 200
    assert resp.get_json()["title"] == "Eating in"

    # an explicit title wins
    resp = client.put(f"/api/budgets/{budget['id']}", json={"name": "x", "title": "Kept"}, headers=auth)
    assert resp.get_json()["title"] == "Kept"


def test_category_with_slash(client, auth):
    _budget(client, auth, category="food/drinks")
    page = client.get("/api/budgets/category/food%2Fdrinks", headers=auth).get_json()
    assert page["total"] == 1
