"""
Tests for AI follow-up drafts.
"""
import json

import pytest

from prospectflow.llm.provider import LLMProvider, LLMResponse
from prospectflow.services import ai_service
from conftest import create_opening, make_premium


class FakeProvider(LLMProvider):
    def __init__(self, content):
        self.content = content
        self.calls = []

    def chat(self, messages, model, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append({"messages": messages, "model": model, **kwargs})
        return LLMResponse(content=self.content, tokens_in=120, tokens_out=80, model=model)


@pytest.fixture
def premium_opening(client, auth_headers, db):
    make_premium(db, "owner@example.com")
    return create_opening(client, auth_headers)


def test_free_user_hits_paywall(client, auth_headers):
    opening = create_opening(client, auth_headers)

    response = client.post("/ai/follow-up-suggestion", json={"job_opening_id": opening["id"]}, headers=auth_headers)

    assert response.status_code == 402
    detail = response.json()["detail"]
    assert detail["code"] == "PAYWALL"
    assert detail["feature"] == "ai_follow_up_suggestion"


def test_template_draft_without_api_key(client, auth_headers, premium_opening):
    response = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"], "follow_up_number": 2, "extra_context": "I shipped a new API."},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["source"] == "template"
    assert body["subject"] == "Following up: Backend Engineer at Acme Corp"
    assert body["body"].startswith("Hi Rita,")
    assert "checking in again" in body["body"]
    assert "I shipped a new API." in body["body"]
    assert body["body"].endswith("Best regards,\nOlivia Owner")


def test_template_draft_uses_saved_subject_and_signature(client, auth_headers, premium_opening):
    client.put(
        "/settings",
        json={"default_email_templates": {
            "follow_up_1": {"subject": "Quick follow-up", "opening_line": ""},
            "shared_signature": "Cheers,\nOlivia",
        }},
        headers=auth_headers,
    )

    body = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"]},
        headers=auth_headers,
    ).json()

    assert body["subject"] == "Quick follow-up"
    assert body["body"].endswith("Cheers,\nOlivia")


def test_unknown_opening(client, auth_headers, other_headers, premium_opening, db):
    make_premium(db, "intruder@example.com")
    response = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"]},
        headers=other_headers,
    )
    assert response.status_code == 404


def test_invalid_follow_up_number(client, auth_headers, premium_opening):
    response = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"], "follow_up_number": 4},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_model_draft(client, auth_headers, premium_opening, monkeypatch):
    provider = FakeProvider(json.dumps({"subject": "Checking in on Backend Engineer", "body": "Hi Rita, any news?"}))
    monkeypatch.setattr(ai_service, "get_provider", lambda: provider)

    response = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"], "tone": "formal"},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    assert response.json() == {
        "subject": "Checking in on Backend Engineer",
        "body": "Hi Rita, any news?",
        "source": "ai",
    }
    prompt = provider.calls[0]["messages"][1]["content"]
    assert "Acme Corp" in prompt
    assert "Tone: formal" in prompt
    assert provider.calls[0]["response_format"] == {"type": "json_object"}


def test_model_plain_text_becomes_body(client, auth_headers, premium_opening, monkeypatch):
    monkeypatch.setattr(ai_service, "get_provider", lambda: FakeProvider("Hi Rita,\n\nJust following up."))

    body = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"]},
        headers=auth_headers,
    ).json()

    assert body["source"] == "ai"
    assert body["body"] == "Hi Rita,\n\nJust following up."
    assert body["subject"] == "Following up: Backend Engineer at Acme Corp"


def test_empty_model_reply_is_gateway_error(client, auth_headers, premium_opening, monkeypatch):
    monkeypatch.setattr(ai_service, "get_provider", lambda: FakeProvider(json.dumps({"subject": "x", "body": ""})))

    response = client.post(
        "/ai/follow-up-suggestion",
        json={"job_opening_id": premium_opening["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 502
