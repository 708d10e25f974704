import pytest
from starlette.websockets import WebSocketDisconnect

from community_messaging.domain.entities.records import Inquiry
from fakes import ALICE, BOB, COMPANY, MALLORY, direct, ts
from jwt_generation import auth_headers, generate_jwt_token

DIRECT = f"direct:{ALICE}:{BOB}"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert client.get("/health").headers["X-Correlation-ID"].startswith("req-")


def test_requires_token(client):
    assert client.get("/conversations").status_code in (401, 403)
    expired = generate_jwt_token(exp=1)
    response = client.get("/conversations", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_send_then_inbox_and_timeline(client, store, notifications):
    response = client.post(
        f"/conversations/direct/{BOB}/messages",
        json={"content": "Is the bike still available?", "subject": "Bike"},
        headers=auth_headers(ALICE),
    )
    assert response.status_code == 201
    entry = response.json()
    assert entry["kind"] == "direct"
    assert entry["author_role"] == "user"
    assert entry["conversation_key"] == DIRECT
    assert [n.recipient_id for n in notifications.saved] == [BOB]

    inbox = client.get("/conversations", headers=auth_headers(BOB)).json()
    assert inbox["total_unread"] == 1
    assert inbox["conversations"][0]["counterpart_id"] == ALICE

    timeline = client.get(f"/conversations/{DIRECT}", headers=auth_headers(BOB)).json()
    assert [e["id"] for e in timeline["entries"]] == [entry["id"]]
    assert timeline["marked_read"] == 1

    inbox = client.get("/conversations", headers=auth_headers(BOB)).json()
    assert inbox["total_unread"] == 0


def test_send_reports_success_when_notifications_fail(client, store, notifications):
    notifications.fail = True

    response = client.post(
        f"/conversations/direct/{BOB}/messages",
        json={"content": "hello"},
        headers=auth_headers(ALICE),
    )

    assert response.status_code == 201
    assert len(store.messages) == 1


def test_failed_send_is_503(client, store):
    store.fail_append = True

    response = client.post(
        f"/conversations/direct/{BOB}/messages",
        json={"content": "hello"},
        headers=auth_headers(ALICE),
    )

    assert response.status_code == 503
    assert store.messages == {}


def test_validation_errors(client):
    headers = auth_headers(ALICE)

    self_send = client.post(f"/conversations/direct/{ALICE}/messages", json={"content": "me"}, headers=headers)
    assert self_send.status_code == 422
    assert self_send.json()["field"] == "recipient_id"
    assert client.post("/conversations/direct/not-a-uuid/messages", json={"content": "x"}, headers=headers).status_code == 422
    assert client.get("/conversations/thread:1", headers=headers).status_code == 422


def test_mark_read_endpoint(client, store):
    store.add(direct("a", BOB, ALICE, 1))

    first = client.post(f"/conversations/{DIRECT}/read", headers=auth_headers(ALICE))
    second = client.post(f"/conversations/{DIRECT}/read", headers=auth_headers(ALICE))

    assert first.json() == {"marked": 1}
    assert second.json() == {"marked": 0}


def test_outsiders_get_403_and_missing_inquiries_404(client, store):
    store.add(Inquiry("q1", ALICE, "Alice", COMPANY, "Hi", ts(1)))

    assert client.get(f"/conversations/{DIRECT}", headers=auth_headers(MALLORY)).status_code == 403
    assert client.get("/conversations/inquiry:q1", headers=auth_headers(MALLORY)).status_code == 403
    assert client.get("/conversations/inquiry:q9", headers=auth_headers(ALICE)).status_code == 404


def test_inquiry_thread_flow(client, store, notifications):
    created = client.post(
        "/inquiries",
        json={"company_id": COMPANY, "inquirer_name": "Alice", "message": "Do you deliver?"},
        headers=auth_headers(ALICE),
    )
    assert created.status_code == 201
    inquiry_id = created.json()["id"].split(":", 1)[1]

    response = client.post(
        f"/inquiries/{inquiry_id}/responses",
        json={"message": "Yes, on weekdays"},
        headers=auth_headers(COMPANY, "company"),
    )
    followup = client.post(
        f"/inquiries/{inquiry_id}/followups",
        json={"message": "Great, thanks"},
        headers=auth_headers(ALICE),
    )
    assert response.status_code == 201 and followup.status_code == 201
    assert client.post(
        f"/inquiries/{inquiry_id}/responses",
        json={"message": "me too"},
        headers=auth_headers(MALLORY, "company"),
    ).status_code == 403

    timeline = client.get(f"/conversations/inquiry:{inquiry_id}", headers=auth_headers(COMPANY)).json()
    assert [(e["kind"], e["author_role"]) for e in timeline["entries"]] == [
        ("inquiry", "user"),
        ("response", "company"),
        ("followup", "user"),
    ]
    assert [n.recipient_id for n in notifications.saved] == [COMPANY, ALICE, COMPANY]


def test_metrics_endpoint(client):
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "messaging_messages_sent_total" in response.text


# ==================== WEBSOCKET ====================


def test_websocket_sends_snapshot_then_deltas(client, store):
    store.add(direct("a", BOB, ALICE, 1))
    token = generate_jwt_token(ALICE)

    with client.websocket_connect(f"/ws/conversations/{DIRECT}?token={token}") as ws:
        snapshot = ws.receive_json()
        assert snapshot["type"] == "snapshot"
        assert [e["id"] for e in snapshot["entries"]] == ["direct:a"]

        client.post(
            f"/conversations/direct/{ALICE}/messages",
            json={"content": "live!"},
            headers=auth_headers(BOB),
        )
        delta = ws.receive_json()
        assert delta["type"] == "entries"
        assert [e["body"] for e in delta["entries"]] == ["live!"]


@pytest.mark.parametrize(
    "path",
    [
        f"/ws/conversations/{DIRECT}",
        f"/ws/conversations/{DIRECT}?token=garbage",
        "/ws/conversations/thread:1?token={token}",
        f"/ws/conversations/{DIRECT}?token={{mallory}}",
    ],
)
def test_websocket_rejects_with_policy_violation(client, path):
    path = path.format(token=generate_jwt_token(ALICE), mallory=generate_jwt_token(MALLORY))

    with client.websocket_connect(path) as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()

    assert exc_info.value.code == 1008


def test_websocket_closes_1011_when_feed_is_down(client, feed):
    feed.fail_subscribe = True
    token = generate_jwt_token(ALICE)

    with client.websocket_connect(f"/ws/conversations/{DIRECT}?token={token}") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()

    assert exc_info.value.code == 1011
