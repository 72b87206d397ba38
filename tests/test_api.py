"""Tests for the HTTP API."""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from vigenere_analyzer import __version__
from vigenere_analyzer.dependencies import SessionOrchestrators, get_session_orchestrators
from vigenere_analyzer.main import app
from vigenere_analyzer.services.analysis.language_model import get_language_model
from vigenere_analyzer.services.engines.vigenere import encrypt
from vigenere_analyzer.services.pipeline.orchestrator import SearchOrchestrator

API = "/api/v1"


@pytest.fixture
def sessions():
    registry = SessionOrchestrators(
        lambda: SearchOrchestrator(
            get_language_model(), max_workers=2, backend="thread", poll_interval=0.01
        )
    )
    app.dependency_overrides[get_session_orchestrators] = lambda: registry
    yield registry
    app.dependency_overrides.clear()


@pytest.fixture
def client(sessions):
    with TestClient(app) as test_client:
        yield test_client


async def post_concurrently(*requests):
    """Send (json, headers) pairs to /analyze at the same time."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await asyncio.gather(*(
            client.post(f"{API}/analyze", json=body, headers=headers)
            for body, headers in requests
        ))


class TestHealth:
    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == __version__


class TestEncryptDecrypt:
    """Test suite for /encrypt and /decrypt."""

    def test_encrypt(self, client):
        response = client.post(
            f"{API}/encrypt", json={"plaintext": "attack at dawn", "key": "KEY"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["ciphertext"] == "kxrkgi er hygr"
        assert body["key_used"] == "key"
        assert body["alphabet"] == "abcdefghijklmnopqrstuvwxyz"

    def test_decrypt(self, client, english_text, alphabet):
        """Decryption reports the plaintext with its scores."""
        response = client.post(
            f"{API}/decrypt",
            json={"ciphertext": encrypt(english_text, "lemon", alphabet), "key": "lemon"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["plaintext"] == english_text
        assert body["key_used"] == "lemon"
        assert body["ic"] > 0.06
        assert body["dict_score"] > 0.1
        assert body["ngram_score"] < 0
        assert "lemon" in body["explanation"]

    def test_custom_alphabet(self, client):
        """Test a digit alphabet round trip."""
        encrypted = client.post(
            f"{API}/encrypt",
            json={"plaintext": "31415926", "key": "42", "alphabet": "0123456789"},
        ).json()["ciphertext"]
        decrypted = client.post(
            f"{API}/decrypt",
            json={"ciphertext": encrypted, "key": "42", "alphabet": "0123456789"},
        ).json()["plaintext"]

        assert decrypted == "31415926"

    def test_key_is_trimmed(self, client):
        """Surrounding whitespace is not part of the key."""
        encrypted = client.post(
            f"{API}/encrypt", json={"plaintext": "attack at dawn", "key": " KEY "}
        )
        decrypted = client.post(
            f"{API}/decrypt", json={"ciphertext": "kxrkgi er hygr", "key": "\tkey\n"}
        )

        assert encrypted.status_code == 200
        assert encrypted.json()["ciphertext"] == "kxrkgi er hygr"
        assert encrypted.json()["key_used"] == "key"
        assert decrypted.status_code == 200
        assert decrypted.json()["plaintext"] == "attack at dawn"
        assert decrypted.json()["key_used"] == "key"

    def test_invalid_key(self, client):
        """Key characters outside the alphabet are a bad request."""
        response = client.post(f"{API}/decrypt", json={"ciphertext": "abc", "key": "k3y"})
        assert response.status_code == 400

    def test_invalid_alphabet(self, client):
        """A one-character alphabet is a bad request."""
        response = client.post(
            f"{API}/encrypt", json={"plaintext": "aaa", "key": "a", "alphabet": "aA"}
        )
        assert response.status_code == 400


class TestAnalyze:
    """Test suite for /analyze."""

    @pytest.fixture
    def payload(self, english_text, alphabet):
        return {
            "ciphertext": encrypt(english_text, "key", alphabet),
            "min_key_length": 1,
            "max_key_length": 6,
            "use_ngrams": False,
        }

    def test_analyze(self, client, payload, english_text):
        """Test a full key search."""
        response = client.post(f"{API}/analyze", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["total_results"] == 2
        assert body["results"][0]["key"] == "key"
        assert body["results"][0]["plaintext"] == english_text
        assert body["results"][0]["method"] == "frequency_analysis"
        assert any("Best key: 'key'" in line for line in body["explanations"])

    def test_display_best(self, client, payload):
        """Only the top result is returned in best mode."""
        response = client.post(f"{API}/analyze", json={**payload, "display": "best"})

        body = response.json()
        assert len(body["results"]) == 1
        assert body["total_results"] == 2

    def test_no_candidates(self, client):
        response = client.post(
            f"{API}/analyze",
            json={"ciphertext": "1234 5678", "min_key_length": 1, "max_key_length": 3},
        )

        assert response.status_code == 422
        assert response.json()["detail"].startswith("No valid keys found")

    def test_invalid_range(self, client, payload):
        """A minimum above the maximum is a bad request."""
        response = client.post(
            f"{API}/analyze", json={**payload, "min_key_length": 5, "max_key_length": 2}
        )
        assert response.status_code == 400

    def test_stream(self, client, payload):
        """The stream ends with exactly one completed line."""
        response = client.post(f"{API}/analyze/stream", json=payload)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")

        events = [json.loads(line) for line in response.text.splitlines() if line]
        assert [e["type"] for e in events[:-1]] == ["progress"] * (len(events) - 1)
        assert events[-1]["type"] == "completed"
        assert events[-1]["results"][0]["key"] == "key"
        assert len({e["job_id"] for e in events}) == 1

    def test_stream_no_candidates(self, client):
        response = client.post(
            f"{API}/analyze/stream",
            json={"ciphertext": "1234 5678", "min_key_length": 1, "max_key_length": 2},
        )

        events = [json.loads(line) for line in response.text.splitlines() if line]
        assert events[-1]["type"] == "failed"
        assert events[-1]["reason"] == "no_candidates"

    def test_stream_invalid_range(self, client, payload):
        response = client.post(
            f"{API}/analyze/stream",
            json={**payload, "min_key_length": 5, "max_key_length": 2},
        )
        assert response.status_code == 400


class TestAnalyzeSessions:
    """Concurrent analyses only supersede each other within one session."""

    @pytest.fixture
    def payload(self, english_text, alphabet):
        return {
            "ciphertext": encrypt(english_text, "key", alphabet),
            "min_key_length": 1,
            "max_key_length": 6,
            "use_ngrams": False,
        }

    @pytest.fixture
    def long_payload(self, english_text, alphabet):
        # Three unknown key positions keep the crib search busy for seconds
        return {
            "ciphertext": encrypt(english_text, "abcdefghij", alphabet),
            "min_key_length": 10,
            "max_key_length": 10,
            "known_plaintext": "the hi?t?r",
        }

    def test_anonymous_requests_run_side_by_side(self, sessions, payload):
        first, second = asyncio.run(post_concurrently((payload, {}), (payload, {})))

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["results"][0]["key"] == "key"
        assert second.json()["results"][0]["key"] == "key"

    def test_different_sessions_run_side_by_side(self, sessions, payload):
        first, second = asyncio.run(post_concurrently(
            (payload, {"X-Session-Id": "alice"}),
            (payload, {"X-Session-Id": "bob"}),
        ))

        assert (first.status_code, second.status_code) == (200, 200)
        assert first.json()["job_id"] == 1
        assert second.json()["job_id"] == 1

    def test_session_job_ids_increase(self, client, payload):
        headers = {"X-Session-Id": "alice"}

        first = client.post(f"{API}/analyze", json=payload, headers=headers)
        second = client.post(f"{API}/analyze", json=payload, headers=headers)

        assert first.json()["job_id"] == 1
        assert second.json()["job_id"] == 2

    def test_same_session_supersedes(self, sessions, payload, long_payload):
        """The older of two analyses in one session gets a conflict."""
        headers = {"X-Session-Id": "alice"}

        async def scenario():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                stale = asyncio.create_task(
                    client.post(f"{API}/analyze", json=long_payload, headers=headers)
                )
                await asyncio.sleep(0.2)
                newer = await client.post(f"{API}/analyze", json=payload, headers=headers)
                return await stale, newer

        stale, newer = asyncio.run(scenario())

        assert stale.status_code == 409
        assert "superseded" in stale.json()["detail"]
        assert newer.status_code == 200
        assert newer.json()["job_id"] == 2


class TestSessionOrchestrators:
    """Test suite for the per-session orchestrator registry."""

    @pytest.fixture
    def registry(self):
        return SessionOrchestrators(
            lambda: SearchOrchestrator(get_language_model(), max_workers=1, backend="thread"),
            max_sessions=2,
        )

    def test_same_session_same_orchestrator(self, registry):
        assert registry.get("alice") is registry.get("alice")
        assert registry.get("alice") is not registry.get("bob")

    def test_anonymous_requests_are_isolated(self, registry):
        assert registry.get(None) is not registry.get(None)

    def test_least_recently_used_session_dropped(self, registry):
        alice = registry.get("alice")
        bob = registry.get("bob")
        registry.get("alice")
        registry.get("carol")

        assert registry.get("alice") is alice
        assert registry.get("bob") is not bob
