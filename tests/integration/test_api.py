"""Integration tests for the HTTP API (review_assistant.main)."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy.exc import OperationalError

from review_assistant.api.middleware.error_handler import GitHubAPIError
from review_assistant.core import dependencies
from review_assistant.core.config import Settings, get_settings
from review_assistant.main import app
from review_assistant.services.github_client import GitHubOAuthClient

from tests.fakes import SAMPLE_REPO


PROTECTED = [
    ("get", "/api/repositories", None),
    ("post", "/api/repositories/select", {"repoName": "octo/sample"}),
    ("post", "/api/repositories/update", {
        "repositoryName": "octo/sample", "filePath": "README.md",
        "content": "x", "message": "m",
    }),
    ("post", "/api/analyze", {"repositoryName": "octo/sample", "branch": "main"}),
    ("post", "/api/chat", {"message": "hi", "context": {"filePath": "a.py"}}),
    ("post", "/api/analyses", {"repoName": "octo/sample", "files": [{"path": "a", "content": "b"}]}),
    ("get", "/api/analyses", None),
]


def _node(nodes, path):
    return next(n for n in nodes if n["path"] == path)


# ── Health endpoints ─────────────────────────────────────────────────────────


class TestHealthEndpoints:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/live").json()["status"] == "alive"

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/health"

    def test_ready(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(
            github_client_id="cid", github_client_secret="secret"
        )
        resp = client.get("/api/ready")

        assert resp.status_code == 200
        assert resp.json()["checks"] == {"database": True, "github_oauth": True, "llm": True}

    def test_not_ready_without_llm_key(self, client, fake_llm):
        app.dependency_overrides[get_settings] = lambda: Settings(
            github_client_id="cid", github_client_secret="secret"
        )
        fake_llm.is_configured = False
        resp = client.get("/api/ready")

        assert resp.status_code == 503
        data = resp.json()
        assert data["ready"] is False
        assert data["checks"]["llm"] is False


# ── Auth gate ────────────────────────────────────────────────────────────────


class TestAuthGate:
    @pytest.mark.parametrize("method,path,body", PROTECTED)
    def test_rejected_without_session(
        self, client, fake_llm, client_factory_calls, method, path, body
    ):
        kwargs = {"json": body} if body is not None else {}
        resp = getattr(client, method)(path, **kwargs)

        assert resp.status_code == 401
        assert resp.json()["error_code"] == "UNAUTHORIZED"
        assert client_factory_calls == []
        assert fake_llm.prompts == []

    def test_unknown_session_rejected(self, client, client_factory_calls):
        client.cookies.set("session", "forged")
        resp = client.get("/api/repositories")
        assert resp.status_code == 401
        assert client_factory_calls == []

    def test_github_client_uses_session_token(self, auth_client, client_factory_calls):
        auth_client.get("/api/repositories")
        assert client_factory_calls == ["gho_test_token"]


# ── Auth endpoints ───────────────────────────────────────────────────────────


@pytest.fixture
def oauth():
    oauth = GitHubOAuthClient("cid", "secret", "http://localhost:3001/auth/github/callback")
    oauth.exchange_code = AsyncMock(return_value="gho_fresh")
    app.dependency_overrides[dependencies.get_oauth_client] = lambda: oauth
    return oauth


class TestAuthEndpoints:
    def test_status_signed_out(self, client):
        resp = client.get("/auth/status")
        assert resp.status_code == 401
        assert resp.json() == {"authenticated": False}

    def test_status_signed_in(self, auth_client, user):
        resp = auth_client.get("/auth/status")
        assert resp.status_code == 200
        data = resp.json()
        assert data["authenticated"] is True
        assert data["user"]["githubId"] == "1001"
        assert data["user"]["email"] == "octo@example.com"

    def test_login_redirects_with_state_cookie(self, client, oauth):
        resp = client.get("/auth/github", follow_redirects=False)

        assert resp.status_code == 307
        location = resp.headers["location"]
        state = parse_qs(urlparse(location).query)["state"][0]
        assert resp.cookies.get("oauth_state") == state

    def test_callback_bad_state(self, client, oauth):
        client.cookies.set("oauth_state", "expected")
        resp = client.get(
            "/auth/github/callback?code=c&state=forged", follow_redirects=False
        )

        assert resp.status_code == 307
        assert resp.headers["location"].endswith("/login")
        oauth.exchange_code.assert_not_awaited()

    def test_callback_storage_failure_redirects_to_login(self, client, oauth, user_store):
        user_store.upsert_user = MagicMock(
            side_effect=OperationalError("INSERT INTO users", {}, Exception("disk I/O error"))
        )
        client.cookies.set("oauth_state", "s")
        resp = client.get(
            "/auth/github/callback?code=c&state=s", follow_redirects=False
        )

        assert resp.status_code == 307
        assert resp.headers["location"].endswith("/login")
        assert "session" not in resp.cookies

    def test_callback_malformed_profile_redirects_to_login(self, client, oauth, fake_github):
        del fake_github.user["id"]
        client.cookies.set("oauth_state", "s")
        resp = client.get(
            "/auth/github/callback?code=c&state=s", follow_redirects=False
        )

        assert resp.status_code == 307
        assert resp.headers["location"].endswith("/login")

    def test_callback_missing_code(self, client, oauth):
        client.cookies.set("oauth_state", "s")
        resp = client.get("/auth/github/callback?state=s", follow_redirects=False)
        assert resp.headers["location"].endswith("/login")

    def test_callback_success(self, client, oauth, user_store):
        client.cookies.set("oauth_state", "s")
        resp = client.get(
            "/auth/github/callback?code=c&state=s", follow_redirects=False
        )

        assert resp.status_code == 307
        assert not resp.headers["location"].endswith("/login")
        token = resp.cookies.get("session")
        identity = user_store.resolve_session(token)
        assert identity.access_token == "gho_fresh"
        assert identity.email == "octo@example.com"

    def test_callback_exchange_failure(self, client, oauth):
        oauth.exchange_code.side_effect = GitHubAPIError("bad code")
        client.cookies.set("oauth_state", "s")
        resp = client.get(
            "/auth/github/callback?code=c&state=s", follow_redirects=False
        )
        assert resp.headers["location"].endswith("/login")

    def test_logout(self, auth_client):
        token = auth_client.cookies.get("session")
        resp = auth_client.post("/auth/logout")
        assert resp.json() == {"success": True}

        auth_client.cookies.clear()
        auth_client.cookies.set("session", token)
        assert auth_client.get("/auth/status").status_code == 401


# ── Repositories ─────────────────────────────────────────────────────────────


class TestRepositories:
    def test_list(self, auth_client, fake_github):
        fake_github.repos = [{
            "id": 1,
            "full_name": "octo/sample",
            "description": "demo",
            "html_url": "https://github.com/octo/sample",
            "default_branch": "main",
        }]
        resp = auth_client.get("/api/repositories")

        assert resp.status_code == 200
        assert resp.json()[0]["name"] == "octo/sample"
        assert resp.json()[0]["defaultBranch"] == "main"

    def test_select_lists_root(self, auth_client):
        resp = auth_client.post("/api/repositories/select", json={"repoName": "octo/sample"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["repoName"] == "octo/sample"
        assert {f["path"] for f in data["files"]} == {"README.md", "src", "docs"}

    def test_update(self, auth_client, fake_github):
        resp = auth_client.post("/api/repositories/update", json={
            "repositoryName": "octo/sample",
            "filePath": "README.md",
            "content": "# Updated\n",
            "message": "Update code based on AI suggestions",
        })

        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert fake_github.files["README.md"] == "# Updated\n"

    def test_update_stale_sha_conflict(self, auth_client, fake_github):
        stale = fake_github.sha_of("README.md")
        fake_github.files["README.md"] = "# Someone else\n"

        resp = auth_client.post("/api/repositories/update", json={
            "repositoryName": "octo/sample",
            "filePath": "README.md",
            "content": "# Mine\n",
            "message": "m",
            "sha": stale,
        })

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "FILE_CONFLICT"
        assert fake_github.files["README.md"] == "# Someone else\n"

    def test_bad_repository_name(self, auth_client, client_factory_calls):
        resp = auth_client.post("/api/repositories/update", json={
            "repositoryName": "not-a-repo",
            "filePath": "README.md",
            "content": "x",
            "message": "m",
        })

        assert resp.status_code == 422
        assert resp.json()["error_code"] == "VALIDATION_ERROR"
        assert resp.json()["details"]["errors"]


# ── Tree fetch ───────────────────────────────────────────────────────────────


class TestAnalyzeEndpoint:
    def test_tree(self, auth_client):
        resp = auth_client.post(
            "/api/analyze", json={"repositoryName": "octo/sample", "branch": "main"}
        )

        assert resp.status_code == 200
        files = resp.json()["files"]
        readme = _node(files, "README.md")
        assert readme["kind"] == "file"
        assert readme["content"] == SAMPLE_REPO["README.md"]

        src = _node(files, "src")
        assert src["kind"] == "directory"
        assert src["content"] is None
        helpers = _node(_node(src["children"], "src/utils")["children"], "src/utils/helpers.py")
        assert helpers["content"] == SAMPLE_REPO["src/utils/helpers.py"]

    def test_unreadable_file_omitted(self, auth_client, fake_github):
        fake_github.fail_paths.add("docs/guide.md")
        resp = auth_client.post(
            "/api/analyze", json={"repositoryName": "octo/sample", "branch": "main"}
        )
        assert resp.status_code == 200
        assert _node(resp.json()["files"], "docs")["children"] == []

    def test_listing_failure_is_502(self, auth_client, fake_github):
        fake_github.fail_paths.add("")
        resp = auth_client.post(
            "/api/analyze", json={"repositoryName": "octo/sample", "branch": "main"}
        )

        assert resp.status_code == 502
        data = resp.json()
        assert data["error_code"] == "UPSTREAM_ERROR"
        assert data["error"] == "github request failed"
        assert "boom" not in resp.text


# ── Chat ─────────────────────────────────────────────────────────────────────


class TestChatEndpoint:
    def test_analyze_action(self, auth_client, fake_llm):
        fake_llm.reply = "OVERVIEW: A\nANALYSIS: B\nCHANGES: C\nRISKS: D"
        resp = auth_client.post("/api/chat", json={
            "message": "print('hello')",
            "context": {"filePath": "src/app.py", "action": "analyze"},
        })

        assert resp.status_code == 200
        data = resp.json()
        assert data["analysis"] == {
            "overview": "A", "analysis": "B", "changes": "C", "risks": "D",
        }
        assert "print('hello')" in fake_llm.prompts[0]

    def test_chat_code_change(self, auth_client, fake_llm):
        fake_llm.reply = "Here you go.\nCODE_START\nprint('bye')\nCODE_END"
        resp = auth_client.post("/api/chat", json={
            "message": "say bye instead",
            "context": {"filePath": "src/app.py", "content": "print('hello')"},
            "history": [{"role": "user", "content": "what is this?"}],
        })

        assert resp.status_code == 200
        data = resp.json()
        assert data["codeChange"] == {"description": "Here you go.", "content": "print('bye')"}
        assert data["message"] == fake_llm.reply
        assert len(fake_llm.histories[0]) == 1

    def test_llm_failure_is_502(self, auth_client, fake_llm):
        fake_llm.fail = True
        resp = auth_client.post("/api/chat", json={
            "message": "hi", "context": {"filePath": "a.py", "content": "x"},
        })
        assert resp.status_code == 502
        assert resp.json()["error"] == "llm request failed"


# ── Stored analyses ──────────────────────────────────────────────────────────


class TestAnalysesEndpoints:
    BODY = {
        "repoName": "octo/sample",
        "files": [
            {"path": "src/app.py", "content": "print('hello')"},
            {"path": "README.md", "content": "# Sample"},
        ],
    }

    def test_create_and_list(self, auth_client, fake_llm):
        fake_llm.reply = "Looks fine."
        created = auth_client.post("/api/analyses", json=self.BODY)

        assert created.status_code == 200
        data = created.json()
        assert data["status"] == "COMPLETED"
        assert [c["filePath"] for c in data["changes"]] == ["src/app.py", "README.md"]
        assert data["changes"][0]["suggestion"] == "Looks fine."

        listed = auth_client.get("/api/analyses").json()
        assert [a["id"] for a in listed] == [data["id"]]

        single = auth_client.get(f"/api/analyses/{data['id']}")
        assert single.json()["repoName"] == "octo/sample"

    def test_failure_recorded(self, auth_client, fake_llm):
        fake_llm.fail = True
        resp = auth_client.post("/api/analyses", json=self.BODY)
        assert resp.status_code == 502

        [record] = auth_client.get("/api/analyses").json()
        assert record["status"] == "FAILED"
        assert record["changes"] == []

    def test_empty_file_list_rejected(self, auth_client):
        resp = auth_client.post("/api/analyses", json={"repoName": "octo/sample", "files": []})
        assert resp.status_code == 422

    def test_unknown_analysis(self, auth_client):
        resp = auth_client.get("/api/analyses/999")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "ANALYSIS_NOT_FOUND"
