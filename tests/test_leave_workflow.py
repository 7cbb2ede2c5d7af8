import pytest
from datetime import date, timedelta
from app.models.leave_request import LeaveStatus


def _create_leave_request(client, headers, start_offset=5, end_offset=9, reason="Summer holiday"):
    start = date.today() + timedelta(days=start_offset)
    end = date.today() + timedelta(days=end_offset)
    return client.post(
        "/api/leave/requests",
        headers=headers,
        json={"start_date": start.isoformat(), "end_date": end.isoformat(), "reason": reason}
    )


def test_create_leave_request(client, employee, auth_headers):
    """Test creating a leave request."""
    response = _create_leave_request(client, auth_headers(employee))
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == LeaveStatus.PENDING
    assert data["store_id"] == "1"
    assert data["user_name"] == "Employee 1"
    assert data["period_label"]


def test_inverted_dates_are_rejected(client, employee, auth_headers):
    headers = auth_headers(employee)
    response = _create_leave_request(client, headers, start_offset=9, end_offset=5)
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "LEAVE_VALIDATION_FAILED"
    assert client.get("/api/leave/requests/mine", headers=headers).json() == []


def test_missing_reason_is_rejected(client, employee, auth_headers):
    response = _create_leave_request(client, auth_headers(employee), reason="   ")
    assert response.status_code == 400


def test_storeless_admin_cannot_submit(client, admin_user, auth_headers):
    response = _create_leave_request(client, auth_headers(admin_user))
    assert response.status_code == 400


def test_my_requests_are_personal(client, employee, lyon_employee, auth_headers):
    _create_leave_request(client, auth_headers(employee), reason="Mine")
    _create_leave_request(client, auth_headers(lyon_employee), reason="Theirs")
    response = client.get("/api/leave/requests/mine", headers=auth_headers(employee))
    assert [r["reason"] for r in response.json()] == ["Mine"]


def test_employee_cannot_review(client, employee, auth_headers):
    response = client.get("/api/leave/requests", headers=auth_headers(employee))
    assert response.status_code == 403


def test_manager_review_is_store_scoped(client, employee, lyon_employee, paris_manager, auth_headers):
    _create_leave_request(client, auth_headers(employee))
    _create_leave_request(client, auth_headers(lyon_employee))
    response = client.get("/api/leave/requests?store_id=2", headers=auth_headers(paris_manager))
    assert response.status_code == 200
    assert {r["store_id"] for r in response.json()} == {"1"}


def test_admin_store_filter(client, employee, lyon_employee, admin_user, auth_headers):
    _create_leave_request(client, auth_headers(employee))
    _create_leave_request(client, auth_headers(lyon_employee))
    headers = auth_headers(admin_user)
    assert len(client.get("/api/leave/requests", headers=headers).json()) == 2
    filtered = client.get("/api/leave/requests?store_id=2", headers=headers).json()
    assert [r["store_id"] for r in filtered] == ["2"]


def test_manager_approval_and_ordering(client, employee, paris_manager, auth_headers):
    first = _create_leave_request(client, auth_headers(employee), reason="First").json()
    second = _create_leave_request(client, auth_headers(employee), reason="Second").json()
    headers = auth_headers(paris_manager)

    review = client.get("/api/leave/requests", headers=headers).json()
    assert [r["id"] for r in review] == [second["id"], first["id"]]

    response = client.put(f"/api/leave/requests/{second['id']}/approve", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "changed": True, "leave_status": "approved"}

    review = client.get("/api/leave/requests", headers=headers).json()
    assert [r["id"] for r in review] == [first["id"], second["id"]]


def test_reject_after_approve_is_noop(client, employee, admin_user, auth_headers):
    req_id = _create_leave_request(client, auth_headers(employee)).json()["id"]
    headers = auth_headers(admin_user)
    client.put(f"/api/leave/requests/{req_id}/approve", headers=headers)

    response = client.put(f"/api/leave/requests/{req_id}/reject", headers=headers)
    assert response.status_code == 200
    assert response.json()["changed"] is False
    assert response.json()["leave_status"] == "approved"


def test_unknown_request_is_silently_ignored(client, admin_user, auth_headers):
    response = client.put("/api/leave/requests/does-not-exist/approve", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert response.json() == {"success": True, "changed": False, "leave_status": None}


def test_manager_cannot_resolve_other_store(client, lyon_employee, paris_manager, auth_headers):
    req_id = _create_leave_request(client, auth_headers(lyon_employee)).json()["id"]
    response = client.put(f"/api/leave/requests/{req_id}/reject", headers=auth_headers(paris_manager))
    assert response.status_code == 403
    assert response.json()["errors"][0]["code"] == "PERMISSION_DENIED"


def test_employee_cannot_approve(client, employee, auth_headers):
    req_id = _create_leave_request(client, auth_headers(employee)).json()["id"]
    response = client.put(f"/api/leave/requests/{req_id}/approve", headers=auth_headers(employee))
    assert response.status_code == 403


def test_calendar_view(client, employee, lyon_employee, auth_headers):
    """Employees see store-wide coverage on the calendar."""
    created = _create_leave_request(client, auth_headers(employee), start_offset=0, end_offset=1).json()
    _create_leave_request(client, auth_headers(lyon_employee), start_offset=0, end_offset=1)

    month = date.today().strftime("%Y-%m")
    response = client.get(f"/api/leave/calendar?month={month}", headers=auth_headers(employee))
    assert response.status_code == 200
    data = response.json()
    assert data["month"] == month
    today = next(d for d in data["days"] if d["day"] == date.today().isoformat())
    assert [r["id"] for r in today["requests"]] == [created["id"]]


def test_calendar_rejects_bad_month(client, employee, auth_headers):
    assert client.get("/api/leave/calendar?month=2026-13", headers=auth_headers(employee)).status_code == 400
    assert client.get("/api/leave/calendar?month=october", headers=auth_headers(employee)).status_code == 422


def test_calendar_day_query(client, employee, admin_user, auth_headers):
    _create_leave_request(client, auth_headers(employee), start_offset=5, end_offset=9)
    headers = auth_headers(admin_user)

    def on(offset):
        day = (date.today() + timedelta(days=offset)).isoformat()
        return client.get(f"/api/leave/calendar/day?day={day}", headers=headers).json()

    assert len(on(4)) == 0
    assert len(on(5)) == 1
    assert len(on(9)) == 1
    assert len(on(10)) == 0


def test_summary(client, employee, paris_manager, lyon_employee, auth_headers):
    req_id = _create_leave_request(client, auth_headers(employee)).json()["id"]
    _create_leave_request(client, auth_headers(employee))
    _create_leave_request(client, auth_headers(lyon_employee))
    client.put(f"/api/leave/requests/{req_id}/approve", headers=auth_headers(paris_manager))

    summary = client.get("/api/leave/summary", headers=auth_headers(employee)).json()
    assert summary == {
        "my_approved": 1,
        "my_pending": 1,
        "pending_to_review": 1,
        "employees": 1,
        "stores": 2,
    }


def test_created_at_survives_storage(client, employee, auth_headers):
    headers = auth_headers(employee)
    created = _create_leave_request(client, headers).json()
    listed = client.get("/api/leave/requests/mine", headers=headers).json()
    assert listed[0]["id"] == created["id"]
    assert listed[0]["created_at"] == created["created_at"]


def test_calendar_rejects_month_outside_date_range(client, employee, auth_headers):
    headers = auth_headers(employee)
    for month in ("9999-12", "0000-01"):
        response = client.get(f"/api/leave/calendar?month={month}", headers=headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "LEAVE_VALIDATION_FAILED"
