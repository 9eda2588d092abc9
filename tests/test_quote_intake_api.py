import pytest


def test_form_token_is_public(client):
    res = client.get("/quotes/form-token")

    assert res.status_code == 200
    assert res.json()["data"]["form_token"]


def test_submission_creates_pending_quote(submit, client, auth_headers, notifications):
    res = submit(name="Jane Doe", email="jane@example.com", service="Plumbing", notes="")

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Thank you! Your quote has been submitted."

    quote = client.get(f"/quotes/{body['data']['id']}", headers=auth_headers()).json()["data"]
    assert quote["title"] == "Jane Doe"
    assert quote["email"] == "jane@example.com"
    assert quote["service"] == "Plumbing"
    assert quote["content"] == "(No notes provided)"
    assert quote["status"] == "pending"

    assert notifications == [
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "service": "Plumbing",
            "notes": "(No notes provided)",
        }
    ]


def test_markup_is_stripped_before_storage(submit, client, auth_headers):
    res = submit(
        name="<b>Jane</b> Doe",
        service="Roofing<script>alert(1)</script>",
        notes="Two storeys<br>\nslate tiles",
    )
    quote = client.get(f"/quotes/{res.json()['data']['id']}", headers=auth_headers()).json()["data"]

    assert quote["title"] == "Jane Doe"
    assert quote["service"] == "Roofing"
    assert quote["content"] == "Two storeys\nslate tiles"


@pytest.mark.parametrize(
    "field, value",
    [
        ("name", ""),
        ("name", "<b></b>"),
        ("email", None),
        ("service", "   "),
    ],
)
def test_missing_required_field_creates_nothing(submit, client, auth_headers, notifications, field, value):
    res = submit(**{field: value})

    assert res.status_code == 422
    body = res.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["message"] == "Please fill in all required fields."
    assert body["details"] == {"fields": [field]}

    counts = client.get("/quotes/counts", headers=auth_headers()).json()["data"]
    assert counts["all"] == 0
    assert notifications == []


def test_invalid_email_is_treated_as_missing(submit):
    res = submit(email="not-an-email")

    assert res.status_code == 422
    assert res.json()["details"] == {"fields": ["email"]}


def test_submission_without_form_token_is_refused(submit, client, auth_headers):
    res = submit(form_token=None)

    assert res.status_code == 403
    assert res.json()["error_code"] == "SECURITY_CHECK_FAILED"

    counts = client.get("/quotes/counts", headers=auth_headers()).json()["data"]
    assert counts["pending"] == 0


def test_staff_token_is_not_a_form_token(submit, client):
    login = client.post(
        "/auth/login",
        json={"email": "admin@example.com", "password": "s3cret-pass"},
    ).json()["data"]

    res = submit(form_token=login["access_token"])

    assert res.status_code == 403


def test_notification_failure_does_not_fail_submission(submit, monkeypatch, get_status):
    monkeypatch.setattr(
        "quotedesk.services.quotes.intake_service.send_admin_notification",
        lambda *args, **kwargs: False,
    )

    res = submit()

    assert res.status_code == 200
    assert get_status(res.json()["data"]["id"]) == "pending"


def test_submission_is_logged_in_activity_feed(create_quote, client, auth_headers):
    quote_id = create_quote(name="Jane Doe", service="Plumbing")

    items = client.get("/activities/", headers=auth_headers()).json()["data"]["items"]
    assert any(
        a["message"] == f"Jane Doe (jane@example.com) requested a quote for Plumbing (#{quote_id})"
        and a["username_snapshot"] == "public"
        for a in items
    )
