from quotedesk.core import config
from quotedesk.core.security import create_action_token


def test_approve_is_idempotent(create_quote, act, get_status):
    quote_id = create_quote()

    first = act("approve", [quote_id])
    second = act("approve", [quote_id])

    assert first.json()["data"]["processed"] == [quote_id]
    assert second.json()["data"]["processed"] == [quote_id]
    assert get_status(quote_id) == "approved"


def test_reject_then_approve(create_quote, act, get_status):
    quote_id = create_quote()

    act("reject", [quote_id])
    assert get_status(quote_id) == "rejected"

    act("approve", [quote_id])
    assert get_status(quote_id) == "approved"


def test_restore_always_returns_to_pending(create_quote, act, get_status):
    quote_id = create_quote()
    act("approve", [quote_id])
    act("trash", [quote_id])
    assert get_status(quote_id) == "trashed"

    res = act("restore", [quote_id], view="trashed")

    assert res.status_code == 200
    assert res.json()["data"]["redirect_status"] == "trashed"
    assert get_status(quote_id) == "pending"


def test_bulk_action_reports_processed_and_skipped(create_quote, act, get_status):
    a = create_quote(name="A")
    b = create_quote(name="B")

    res = act("trash", [a, b, 999, a], role="editor", view="pending")

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "2 quote(s) updated"
    assert body["data"]["processed"] == [a, b]
    assert body["data"]["skipped"] == [999]
    assert body["data"]["redirect_status"] == "pending"
    assert get_status(a) == get_status(b) == "trashed"


def test_transitions_outside_the_table_are_skipped(create_quote, act, get_status):
    trashed = create_quote(name="Trashed")
    pending = create_quote(name="Pending")
    act("trash", [trashed])

    approve = act("approve", [trashed]).json()["data"]
    restore = act("restore", [pending]).json()["data"]

    assert approve["processed"] == [] and approve["skipped"] == [trashed]
    assert restore["processed"] == [] and restore["skipped"] == [pending]
    assert get_status(trashed) == "trashed"
    assert get_status(pending) == "pending"


def test_purge_is_permanent_and_lands_on_trash_view(create_quote, act, get_status):
    quote_id = create_quote()

    res = act("purge", [quote_id], view="pending")

    assert res.json()["data"]["processed"] == [quote_id]
    assert res.json()["data"]["redirect_status"] == "trashed"
    assert get_status(quote_id) is None


def test_purge_can_require_trash(create_quote, act, get_status, monkeypatch):
    monkeypatch.setattr(config, "PURGE_REQUIRES_TRASH", True)
    live = create_quote(name="Live")
    binned = create_quote(name="Binned")
    act("trash", [binned])

    res = act("purge", [live, binned]).json()["data"]

    assert res["processed"] == [binned]
    assert res["skipped"] == [live]
    assert get_status(live) == "pending"
    assert get_status(binned) is None


def test_action_without_token_is_refused(client, auth_headers, create_quote, get_status):
    quote_id = create_quote()

    res = client.post(
        "/quotes/bulk-action",
        json={"action": "approve", "ids": [quote_id]},
        headers=auth_headers(),
    )

    assert res.status_code == 403
    assert res.json()["error_code"] == "SECURITY_CHECK_FAILED"
    assert get_status(quote_id) == "pending"


def test_token_for_another_action_is_refused(client, auth_headers, create_quote, get_status):
    quote_id = create_quote()
    headers = auth_headers()
    token = client.post(
        "/quotes/action-token",
        json={"action": "approve", "ids": [quote_id]},
        headers=headers,
    ).json()["data"]["token"]

    res = client.post(
        "/quotes/bulk-action",
        json={"action": "purge", "ids": [quote_id], "token": token},
        headers=headers,
    )

    assert res.status_code == 403
    assert get_status(quote_id) == "pending"


def test_token_for_other_ids_is_refused(client, auth_headers, create_quote, get_status):
    a = create_quote(name="A")
    b = create_quote(name="B")
    headers = auth_headers()
    token = client.post(
        "/quotes/action-token",
        json={"action": "trash", "ids": [a]},
        headers=headers,
    ).json()["data"]["token"]

    res = client.post(
        "/quotes/bulk-action",
        json={"action": "trash", "ids": [a, b], "token": token},
        headers=headers,
    )

    assert res.status_code == 403
    assert get_status(a) == get_status(b) == "pending"


def test_token_issued_to_another_user_is_refused(client, auth_headers, create_quote, get_status):
    quote_id = create_quote()
    token = create_action_token("editor@example.com", "approve", [quote_id])

    res = client.post(
        "/quotes/bulk-action",
        json={"action": "approve", "ids": [quote_id], "token": token},
        headers=auth_headers("admin"),
    )

    assert res.status_code == 403
    assert get_status(quote_id) == "pending"


def test_viewer_cannot_moderate(client, auth_headers, create_quote, get_status):
    quote_id = create_quote()
    token = create_action_token("viewer@example.com", "approve", [quote_id])

    issue = client.post(
        "/quotes/action-token",
        json={"action": "approve", "ids": [quote_id]},
        headers=auth_headers("viewer"),
    )
    apply = client.post(
        "/quotes/bulk-action",
        json={"action": "approve", "ids": [quote_id], "token": token},
        headers=auth_headers("viewer"),
    )

    assert issue.status_code == 403
    assert apply.status_code == 403
    assert apply.json()["error_code"] == "PERMISSION_DENIED"
    assert get_status(quote_id) == "pending"


def test_anonymous_cannot_moderate(client, create_quote, get_status):
    quote_id = create_quote()

    res = client.post(
        "/quotes/bulk-action",
        json={"action": "trash", "ids": [quote_id], "token": "x"},
    )

    assert res.status_code == 401
    assert get_status(quote_id) == "pending"


def test_empty_selection_is_rejected(client, auth_headers):
    res = client.post(
        "/quotes/bulk-action",
        json={"action": "trash", "ids": [], "token": "x"},
        headers=auth_headers(),
    )

    assert res.status_code == 422


def test_unknown_action_is_rejected(client, auth_headers, create_quote):
    quote_id = create_quote()

    res = client.post(
        "/quotes/action-token",
        json={"action": "publish", "ids": [quote_id]},
        headers=auth_headers(),
    )

    assert res.status_code == 422


def test_single_restore_endpoint(client, auth_headers, create_quote, act, get_status):
    quote_id = create_quote()
    act("reject", [quote_id])
    act("trash", [quote_id])
    headers = auth_headers("editor")
    token = client.post(
        "/quotes/action-token",
        json={"action": "restore", "ids": [quote_id]},
        headers=headers,
    ).json()["data"]["token"]

    res = client.post(f"/quotes/{quote_id}/restore", json={"token": token}, headers=headers)

    assert res.status_code == 200
    assert res.json()["message"] == "Quote restored"
    assert res.json()["data"]["redirect_status"] == "pending"
    assert get_status(quote_id) == "pending"


def test_single_restore_needs_a_restore_token(client, auth_headers, create_quote, act, get_status):
    quote_id = create_quote()
    act("trash", [quote_id])

    res = client.post(f"/quotes/{quote_id}/restore", json={}, headers=auth_headers())

    assert res.status_code == 403
    assert get_status(quote_id) == "trashed"


def test_moderation_is_written_to_activity_feed(client, auth_headers, create_quote, act):
    a = create_quote(name="A")
    b = create_quote(name="B")
    act("approve", [a, b], role="editor")

    items = client.get("/activities/", headers=auth_headers()).json()["data"]["items"]

    assert any(
        i["message"] == f"Editor (editor@example.com) approved 2 quote(s): #{a}, #{b}"
        for i in items
    )


def test_fully_skipped_batch_writes_no_activity(client, auth_headers, act):
    before = client.get("/activities/", headers=auth_headers()).json()["data"]["total"]

    res = act("approve", [404])

    after = client.get("/activities/", headers=auth_headers()).json()["data"]["total"]
    assert res.json()["data"]["skipped"] == [404]
    assert after == before
