"""Tests for LinearService"""
import json

import httpx
import pytest

from sprout.exceptions import ProviderAuthError, ProviderFetchError
from sprout.models.candidate import LinearIssue
from sprout.services.linear_service import LinearService, parse_issue

API_URL = "https://api.linear.test/graphql"


def _node(identifier, branch, title="Title", state="Todo", priority="High"):
    return {
        "identifier": identifier,
        "title": title,
        "branchName": branch,
        "state": {"name": state},
        "priorityLabel": priority,
    }


def _issues_payload(nodes):
    return {"data": {"viewer": {"assignedIssues": {"nodes": nodes}}}}


def _service(handler, api_key="lin_api_test"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return LinearService(api_key, API_URL, http_client=client)


class TestParseIssue:
    def test_full_node(self):
        issue = parse_issue(_node("ENG-1", "eng-1-login", "Fix login", "In Progress", "Urgent"))
        assert issue == LinearIssue("ENG-1", "Fix login", "eng-1-login", "In Progress", "Urgent")

    def test_missing_optional_fields(self):
        issue = parse_issue({"identifier": "ENG-2", "branchName": "eng-2", "state": None})
        assert (issue.title, issue.state_name, issue.priority_label) == ("", "", "")


class TestListAssignedIssues:
    """Test the assigned issues query."""

    def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_issues_payload([]))

        _service(handler, api_key="lin_api_abc").list_assigned_issues(limit=5)

        assert seen["url"] == API_URL
        assert seen["auth"] == "lin_api_abc"
        assert seen["body"]["variables"] == {"first": 5}
        assert "assignedIssues" in seen["body"]["query"]

    def test_returns_issues_in_order(self):
        def handler(request):
            return httpx.Response(200, json=_issues_payload([
                _node("ENG-2", "eng-2-second"),
                _node("ENG-1", "eng-1-first"),
            ]))

        issues = _service(handler).list_assigned_issues()

        assert [i.identifier for i in issues] == ["ENG-2", "ENG-1"]
        assert issues[0].branch_name == "eng-2-second"

    def test_skips_issues_without_branch(self):
        def handler(request):
            return httpx.Response(200, json=_issues_payload([
                _node("ENG-1", "eng-1"),
                _node("ENG-2", None),
                _node("ENG-3", ""),
            ]))

        assert [i.identifier for i in _service(handler).list_assigned_issues()] == ["ENG-1"]

    def test_unauthorized_status(self):
        def handler(request):
            return httpx.Response(401, json={"errors": [{"message": "Authentication required"}]})

        with pytest.raises(ProviderAuthError):
            _service(handler).list_assigned_issues()

    def test_authentication_error_code(self):
        def handler(request):
            return httpx.Response(200, json={
                "errors": [{"message": "Invalid key", "extensions": {"code": "AUTHENTICATION_ERROR"}}],
            })

        with pytest.raises(ProviderAuthError) as excinfo:
            _service(handler).list_assigned_issues()

        assert excinfo.value.detail == "Invalid key"

    def test_other_graphql_error(self):
        def handler(request):
            return httpx.Response(400, json={"errors": [{"message": "Field 'x' doesn't exist"}]})

        with pytest.raises(ProviderFetchError) as excinfo:
            _service(handler).list_assigned_issues()

        assert not isinstance(excinfo.value, ProviderAuthError)
        assert excinfo.value.detail == "Linear API error: Field 'x' doesn't exist"

    @pytest.mark.parametrize("body", ["null", "[]", "\"Bad Gateway\""])
    def test_non_object_body(self, body):
        def handler(request):
            return httpx.Response(502, text=body)

        with pytest.raises(ProviderFetchError) as excinfo:
            _service(handler).list_assigned_issues()

        assert excinfo.value.detail == "Linear API error: 502 Bad Gateway"

    def test_server_error(self):
        def handler(request):
            return httpx.Response(500, text="upstream exploded")

        with pytest.raises(ProviderFetchError) as excinfo:
            _service(handler).list_assigned_issues()

        assert "500" in excinfo.value.detail

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderFetchError) as excinfo:
            _service(handler).list_assigned_issues()

        assert excinfo.value.provider == "Linear"
