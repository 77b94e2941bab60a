"""Tests for the GitHub artifacts client."""

import json

import httpx
import pytest
from tenacity import wait_none

from artifact_evictor.core.exceptions import DeletionError, FetchError
from artifact_evictor.github.client import GitHubClient

LIST_URL = "/repos/octo/widgets/actions/artifacts"


def _artifact_json(id: int, size: int = 100, created_at: str | None = "2024-01-01T00:00:00Z") -> dict:
    return {
        "id": id,
        "node_id": f"MDg6QXJ0aWZhY3Q{id}",
        "name": f"artifact-{id}",
        "size_in_bytes": size,
        "url": f"https://api.github.com/repos/octo/widgets/actions/artifacts/{id}",
        "archive_download_url": "https://example.invalid/zip",
        "expired": False,
        "created_at": created_at,
        "expires_at": None,
        "updated_at": None,
        "workflow_run": None,
    }


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    """Retry immediately instead of backing off."""
    monkeypatch.setattr(GitHubClient._send.retry, "wait", wait_none())


def _client(handler, per_page: int = 100) -> GitHubClient:
    return GitHubClient(
        token="test-token",
        per_page=per_page,
        transport=httpx.MockTransport(handler),
    )


class TestListArtifacts:
    """Tests for list_artifacts."""

    def test_single_page(self) -> None:
        """A short first page ends pagination."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json={"total_count": 2, "artifacts": [_artifact_json(1), _artifact_json(2)]}
            )

        with _client(handler) as client:
            artifacts = client.list_artifacts("octo", "widgets")

        assert [a.id for a in artifacts] == [1, 2]
        assert len(requests) == 1
        assert requests[0].url.path == LIST_URL
        assert requests[0].url.params["per_page"] == "100"
        assert requests[0].headers["Authorization"] == "Bearer test-token"
        assert requests[0].headers["Accept"] == "application/vnd.github+json"

    def test_follows_pages(self) -> None:
        """Pages are requested until a short page arrives."""
        pages = {
            "1": [_artifact_json(1), _artifact_json(2)],
            "2": [_artifact_json(3), _artifact_json(4)],
            "3": [_artifact_json(5)],
        }
        seen_pages: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            page = request.url.params["page"]
            seen_pages.append(page)
            return httpx.Response(200, json={"total_count": 5, "artifacts": pages[page]})

        with _client(handler, per_page=2) as client:
            artifacts = client.list_artifacts("octo", "widgets")

        assert seen_pages == ["1", "2", "3"]
        assert [a.id for a in artifacts] == [1, 2, 3, 4, 5]

    def test_stops_at_total_count(self) -> None:
        """A full last page does not trigger an extra request."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(
                200, json={"total_count": 2, "artifacts": [_artifact_json(1), _artifact_json(2)]}
            )

        with _client(handler, per_page=2) as client:
            assert len(client.list_artifacts("octo", "widgets")) == 2
        assert calls == 1

    def test_shifted_listing_skips_duplicates(self) -> None:
        """An artifact repeated on a later page is listed once."""
        pages = {
            "1": [_artifact_json(1, size=10), _artifact_json(2, size=10)],
            "2": [_artifact_json(2, size=10)],
        }

        def handler(request: httpx.Request) -> httpx.Response:
            page = request.url.params["page"]
            return httpx.Response(200, json={"total_count": 3, "artifacts": pages[page]})

        with _client(handler, per_page=2) as client:
            artifacts = client.list_artifacts("octo", "widgets")

        assert [a.id for a in artifacts] == [1, 2]
        assert sum(a.size_in_bytes for a in artifacts) == 20

    def test_empty_repository(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"total_count": 0, "artifacts": []})

        with _client(handler) as client:
            assert client.list_artifacts("octo", "widgets") == []

    def test_parses_timestamps_and_nulls(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"total_count": 2, "artifacts": [_artifact_json(1), _artifact_json(2, created_at=None)]},
            )

        with _client(handler) as client:
            first, second = client.list_artifacts("octo", "widgets")
        assert first.created_at.year == 2024
        assert second.created_at is None

    @pytest.mark.parametrize("status_code", [401, 403, 404])
    def test_client_errors_not_retried(self, status_code: int) -> None:
        """Auth and not-found errors fail immediately."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(status_code, json={"message": "Bad credentials"})

        with _client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                client.list_artifacts("octo", "widgets")

        assert calls == 1
        assert exc_info.value.status_code == status_code
        assert exc_info.value.repository == "octo/widgets"
        assert "Bad credentials" in exc_info.value.message

    def test_transient_error_retried(self) -> None:
        """A 503 followed by success is retried transparently."""
        responses = iter(
            [
                httpx.Response(503),
                httpx.Response(200, json={"total_count": 1, "artifacts": [_artifact_json(1)]}),
            ]
        )

        with _client(lambda request: next(responses)) as client:
            artifacts = client.list_artifacts("octo", "widgets")
        assert [a.id for a in artifacts] == [1]

    def test_retries_exhausted(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(429, json={"message": "rate limited"})

        with _client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                client.list_artifacts("octo", "widgets")
        assert calls == 3
        assert exc_info.value.status_code == 429

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(FetchError, match="HTTP error while listing artifacts"):
                client.list_artifacts("octo", "widgets")

    def test_malformed_listing(self) -> None:
        """Artifacts missing required fields are rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"total_count": 1, "artifacts": [{"id": 1}]})

        with _client(handler) as client:
            with pytest.raises(FetchError, match="Malformed artifact listing"):
                client.list_artifacts("octo", "widgets")

    def test_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        with _client(handler) as client:
            with pytest.raises(FetchError):
                client.list_artifacts("octo", "widgets")


class TestDeleteArtifact:
    """Tests for delete_artifact."""

    def test_success(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(204)

        with _client(handler) as client:
            assert client.delete_artifact("octo", "widgets", 42) is None

        assert requests[0].method == "DELETE"
        assert requests[0].url.path == f"{LIST_URL}/42"

    def test_already_deleted(self) -> None:
        """A 404 means the artifact is gone already."""
        with _client(lambda request: httpx.Response(404)) as client:
            client.delete_artifact("octo", "widgets", 42)

    def test_forbidden(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, content=json.dumps({"message": "Resource not accessible"}))

        with _client(handler) as client:
            with pytest.raises(DeletionError) as exc_info:
                client.delete_artifact("octo", "widgets", 42)

        error = exc_info.value
        assert error.artifact_id == 42
        assert error.status_code == 403
        assert error.message == "HTTP 403 Resource not accessible"

    def test_server_error_retried_then_fails(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(502)

        with _client(handler) as client:
            with pytest.raises(DeletionError) as exc_info:
                client.delete_artifact("octo", "widgets", 7)
        assert calls == 3
        assert exc_info.value.status_code == 502

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("reset", request=request)

        with _client(handler) as client:
            with pytest.raises(DeletionError, match="HTTP error during delete"):
                client.delete_artifact("octo", "widgets", 7)
