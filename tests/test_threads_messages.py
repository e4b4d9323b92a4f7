import pytest


@pytest.fixture
def contact(client, auth_headers):
    res = client.post('/contacts', json={"name": "Ana Buyer", "email": "ana@shop.com", "phone": "+15557654321"},
                      headers=auth_headers)
    assert res.status_code == 201
    return res.get_json()["data"]["contact"]


@pytest.fixture
def thread(client, auth_headers, contact, agent):
    res = client.post('/threads', json={
        "contactId": contact["id"],
        "agentId": agent["id"],
        "name": "Order question",
        "origin": "website",
    }, headers=auth_headers)
    assert res.status_code == 201
    return res.get_json()["data"]["thread"]


def test_contact_duplicates_conflict(client, auth_headers, contact):
    res = client.post('/contacts', json={"email": "ana@shop.com"}, headers=auth_headers)
    assert res.status_code == 409
    res = client.post('/contacts', json={"phone": "+15557654321"}, headers=auth_headers)
    assert res.status_code == 409


def test_contact_lookup_and_search(client, auth_headers, contact):
    res = client.get(f"/contacts/{contact['id']}", headers=auth_headers)
    assert res.get_json()["data"]["contact"]["email"] == "ana@shop.com"

    assert client.get('/contacts/9999', headers=auth_headers).status_code == 404

    res = client.get('/contacts?search=ana', headers=auth_headers)
    assert res.get_json()["data"]["pagination"]["totalContacts"] == 1


def test_contact_rejects_bad_phone(client, auth_headers):
    res = client.post('/contacts', json={"phone": "call me"}, headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["errors"][0]["field"] == "phone"


def test_thread_requires_existing_contact_and_owned_agent(client, auth_headers, other_headers, contact, agent):
    body = {"contactId": 9999, "agentId": agent["id"], "name": "Order question", "origin": "website"}
    res = client.post('/threads', json=body, headers=auth_headers)
    assert res.status_code == 404
    assert res.get_json()["message"] == "Contact not found"

    body["contactId"] = contact["id"]
    res = client.post('/threads', json=body, headers=other_headers)
    assert res.status_code == 404
    assert res.get_json()["message"] == "Agent not found"


def test_thread_rejects_unknown_origin(client, auth_headers, contact, agent):
    res = client.post('/threads', json={
        "contactId": contact["id"], "agentId": agent["id"], "name": "Order question", "origin": "carrier-pigeon",
    }, headers=auth_headers)
    assert res.status_code == 400


def test_thread_list_includes_last_message_preview(app, client, auth_headers, thread):
    app.config["AUTO_REPLY_MESSAGE"] = "z" * 150
    res = client.post('/messages', json={"threadId": thread["id"], "role": "user", "content": "Hello"},
                      headers=auth_headers)
    assert res.status_code == 201

    res = client.get('/threads', headers=auth_headers)
    data = res.get_json()["data"]
    assert data["pagination"]["totalThreads"] == 1
    item = data["threads"][0]
    assert item["contact"]["name"] == "Ana Buyer"
    assert item["agent"]["name"] == "Support Bot"
    # the canned reply is the newest message
    assert item["lastMessage"]["role"] == "assistant"
    assert item["lastMessage"]["content"] == "z" * 100 + "..."

    res = client.get(f"/threads/{thread['id']}", headers=auth_headers)
    assert res.get_json()["data"]["thread"]["lastMessage"] == item["lastMessage"]



def test_thread_without_messages_has_no_preview(client, auth_headers, thread):
    res = client.get(f"/threads/{thread['id']}", headers=auth_headers)
    assert res.get_json()["data"]["thread"]["lastMessage"] is None


def test_thread_filters(client, auth_headers, thread, contact, agent):
    res = client.get('/threads?origin=whatsapp', headers=auth_headers)
    assert res.get_json()["data"]["threads"] == []

    res = client.get(f"/threads?agentId={agent['id']}&contactId={contact['id']}&search=order", headers=auth_headers)
    assert [t["id"] for t in res.get_json()["data"]["threads"]] == [thread["id"]]


def test_foreign_thread_is_hidden(client, other_headers, thread):
    assert client.get(f"/threads/{thread['id']}", headers=other_headers).status_code == 404
    assert client.get('/threads', headers=other_headers).get_json()["data"]["threads"] == []

    res = client.post('/messages', json={"threadId": thread["id"], "role": "user", "content": "Hello"},
                      headers=other_headers)
    assert res.status_code == 404
    assert res.get_json()["message"] == "Thread not found"


def test_create_message_adds_assistant_reply(app, client, auth_headers, thread):
    res = client.post('/messages', json={"threadId": thread["id"], "role": "user", "content": "  Where is it?  "},
                      headers=auth_headers)
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["message"]["content"] == "Where is it?"
    assert data["assistantMessage"]["role"] == "assistant"
    assert data["assistantMessage"]["content"] == app.config["AUTO_REPLY_MESSAGE"]


def test_messages_listed_oldest_first(client, auth_headers, thread):
    for text in ("first", "second"):
        client.post('/messages', json={"threadId": thread["id"], "role": "user", "content": text},
                    headers=auth_headers)

    res = client.get(f"/messages?threadId={thread['id']}", headers=auth_headers)
    data = res.get_json()["data"]
    ids = [m["id"] for m in data["messages"]]
    assert ids == sorted(ids)
    assert [m["content"] for m in data["messages"] if m["role"] == "user"] == ["first", "second"]
    assert data["pagination"]["totalMessages"] == 4

    res = client.get(f"/messages?threadId={thread['id']}&role=user&search=sec", headers=auth_headers)
    assert [m["content"] for m in res.get_json()["data"]["messages"]] == ["second"]


def test_message_lookup_is_scoped(client, auth_headers, other_headers, thread):
    created = client.post('/messages', json={"threadId": thread["id"], "role": "user", "content": "Hello"},
                          headers=auth_headers).get_json()["data"]["message"]

    res = client.get(f"/messages/{created['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["message"]["content"] == "Hello"

    res = client.get(f"/messages/{created['id']}", headers=other_headers)
    assert res.status_code == 404
    assert client.get('/messages', headers=other_headers).get_json()["data"]["messages"] == []


def test_list_rejects_bad_paging(client, auth_headers):
    res = client.get('/messages?limit=500', headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["errors"][0]["field"] == "limit"


def test_out_of_range_ids_in_paths_and_filters(client, auth_headers, thread):
    huge = 10**20
    for path in (f"/threads/{huge}", f"/messages/{huge}", f"/contacts/{huge}", f"/agents/{huge}"):
        assert client.get(path, headers=auth_headers).status_code == 404

    res = client.get(f"/messages?threadId={huge}", headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["errors"][0]["field"] == "threadId"

    res = client.post('/messages', json={"threadId": huge, "role": "user", "content": "Hello"}, headers=auth_headers)
    assert res.status_code == 400


def test_query_string_ids_are_parsed(client, auth_headers, thread):
    res = client.get(f"/threads?agentId={thread['agentId']}", headers=auth_headers)
    assert [t["id"] for t in res.get_json()["data"]["threads"]] == [thread["id"]]
