import pytest
from fastapi import status
from starlette.requests import Request

from gym_api.core.gate import (
    ADMIN_API_PREFIXES,
    PUBLIC_PREFIXES,
    GateAction,
    RoutePolicy,
    evaluate_request,
    is_login_page,
    path_matches,
)


def make_request(path, headers=None):
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    })


class TestPathMatching:

    @pytest.mark.parametrize("path,prefix,expected", [
        ("/admin", "/admin", True),
        ("/admin/members", "/admin", True),
        ("/administrator", "/admin", False),
        ("/", "/", True),
        ("/admin", "/", False),
        ("/trainers", "/trainer", False),
        ("/api/admin/stats/daily", "/api/admin/stats", True),
        ("/api/admin/statsx", "/api/admin/stats", False),
    ])
    def test_segment_matching(self, path, prefix, expected):
        assert path_matches(path, prefix) is expected

    @pytest.mark.parametrize("path,expected", [
        ("/admin/login", True),
        ("/admin/login/", True),
        ("/admin/login/extra", False),
        ("/admin", False),
    ])
    def test_login_page_ignores_trailing_slash(self, path, expected):
        assert is_login_page(path, "/admin/login") is expected


class TestGateDecisions:
    """
    Decisions taken by evaluate_request, without the HTTP layer
    """

    policy = RoutePolicy()

    def test_default_policy_lists(self):
        assert self.policy.public_prefixes == PUBLIC_PREFIXES
        assert self.policy.admin_api_prefixes == ADMIN_API_PREFIXES

    @pytest.mark.parametrize("path", ["/", "/ai-planner", "/api/auth/login", "/api/trainers/auth", "/trainers/42"])
    def test_public_paths_allowed(self, path):
        assert evaluate_request(make_request(path), self.policy).action is GateAction.ALLOW

    def test_admin_page_without_token_redirects(self):
        decision = evaluate_request(make_request("/admin/members"), self.policy)

        assert decision.action is GateAction.REDIRECT
        assert decision.location == "/admin/login"

    def test_admin_login_page_allowed(self):
        assert evaluate_request(make_request("/admin/login"), self.policy).action is GateAction.ALLOW

    @pytest.mark.parametrize("path", ["/admin/login/", "/trainer/login/"])
    def test_login_pages_with_trailing_slash_allowed(self, path):
        assert evaluate_request(make_request(path), self.policy).action is GateAction.ALLOW

    def test_admin_page_with_admin_token(self, admin_token):
        request = make_request("/admin/members", {"Authorization": f"Bearer {admin_token}"})

        assert evaluate_request(request, self.policy).action is GateAction.ALLOW

    def test_admin_page_with_trainer_token_redirects(self, trainer_token):
        request = make_request("/admin", {"Cookie": f"auth-token={trainer_token}"})

        assert evaluate_request(request, self.policy).action is GateAction.REDIRECT

    def test_trainer_page_requires_token_presence_only(self):
        missing = evaluate_request(make_request("/trainer/members"), self.policy)
        present = evaluate_request(make_request("/trainer/members", {"Cookie": "trainer-token=opaque"}), self.policy)

        assert missing.action is GateAction.REDIRECT
        assert missing.location == "/trainer/login"
        assert present.action is GateAction.ALLOW

    def test_admin_api_without_token_rejected(self):
        decision = evaluate_request(make_request("/api/admin/notifications"), self.policy)

        assert decision.action is GateAction.REJECT

    def test_unlisted_api_passes_through(self):
        assert evaluate_request(make_request("/api/members"), self.policy).action is GateAction.ALLOW

    def test_custom_policy(self):
        policy = RoutePolicy(public_prefixes=("/", "/admin/help"))

        assert evaluate_request(make_request("/admin/help"), policy).action is GateAction.ALLOW
        assert evaluate_request(make_request("/admin/members"), policy).action is GateAction.REDIRECT


class TestGateMiddleware:
    """
    The gate as seen through the application
    """

    def test_redirect_to_admin_login(self, client):
        response = client.get("/admin/members?page=2", follow_redirects=False)

        assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT
        assert response.headers["location"] == "http://testserver/admin/login"

    def test_admin_page_with_cookie(self, client, admin_token):
        client.cookies.set("auth-token", admin_token)
        response = client.get("/admin/members", follow_redirects=False)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"page": "admin-members"}

    def test_admin_page_with_expired_token(self, client, accounts):
        from datetime import timedelta
        from gym_api.core.security import issue_token
        from gym_api.models.token import SUPER_ADMIN, TokenPayload

        admin = accounts["admin"]
        expired = issue_token(
            TokenPayload(user_id=admin.id, email=admin.email, role=SUPER_ADMIN, name=admin.name),
            expires_delta=timedelta(seconds=-5)
        )
        response = client.get("/admin", headers={"Authorization": f"Bearer {expired}"}, follow_redirects=False)

        assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT

    def test_trainer_page_redirect(self, client):
        response = client.get("/trainer", follow_redirects=False)

        assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT
        assert response.headers["location"] == "http://testserver/trainer/login"

    def test_trainer_page_with_token(self, client, trainer_headers):
        response = client.get("/trainer/members", headers=trainer_headers, follow_redirects=False)

        assert response.status_code == status.HTTP_200_OK

    def test_admin_api_rejected_with_json(self, client):
        response = client.get("/api/admin/stats")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Unauthorized"}

    def test_admin_api_rejects_trainer(self, client, trainer_headers):
        response = client.get("/api/admin/notifications", headers=trainer_headers)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Unauthorized"}

    def test_lookalike_path_not_guarded(self, client):
        response = client.get("/administrator", follow_redirects=False)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_admin_page_with_braces_in_path(self, client):
        response = client.get("/admin/%7Bx%7D", follow_redirects=False)

        assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT
        assert response.headers["location"] == "http://testserver/admin/login"

    def test_admin_api_with_braces_in_path(self, client):
        response = client.get("/api/admin/stats/%7Bx%7D")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Unauthorized"}

    def test_public_path_with_braces(self, client):
        response = client.get("/trainers/%7Bx%7D", headers={"X-Forwarded-For": "{evil}"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_member_with_braces_in_id(self, client, admin_headers):
        response = client.get("/api/members/%7Bid%7D", headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Member not found"
