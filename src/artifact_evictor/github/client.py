"""
GitHub client - artifact inventory and deletion over the REST API.

Only the two endpoints the evictor needs are wrapped:
- GET    /repos/{owner}/{repo}/actions/artifacts (paginated)
- DELETE /repos/{owner}/{repo}/actions/artifacts/{artifact_id}
"""

import logging

import httpx
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from artifact_evictor.artifacts.models import Artifact
from artifact_evictor.core.exceptions import (
    DeletionError,
    FetchError,
    is_retriable_status,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
MAX_PER_PAGE = 100


def _is_retriable(error: BaseException) -> bool:
    """Retry rate limits, gateway errors and dropped connections."""
    if isinstance(error, httpx.HTTPStatusError):
        return is_retriable_status(error.response.status_code)
    return isinstance(error, httpx.TransportError)


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's error message from a response, if it sent one."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or ""
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.reason_phrase or ""


class GitHubClient:
    """
    Minimal GitHub Actions artifacts client.

    Transient failures (429, 502, 503, 504, connection errors) are retried
    with exponential backoff; everything else is converted into
    FetchError or DeletionError for the caller.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 30.0,
        per_page: int = MAX_PER_PAGE,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            token: API token sent as a bearer token
            base_url: API root, override for GitHub Enterprise
            timeout_seconds: Per-request timeout
            per_page: Page size for listing (capped at 100 by the API)
            transport: Optional httpx transport (used by tests)
        """
        self._per_page = max(1, min(per_page, MAX_PER_PAGE))
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=60),
        retry=retry_if_exception(_is_retriable),
        reraise=True,
    )
    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, raising httpx.HTTPStatusError on non-2xx answers."""
        response = self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def list_artifacts(self, owner: str, repo: str) -> list[Artifact]:
        """
        List every artifact of a repository, following pagination.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            All artifacts, in the order the API returned them

        Raises:
            FetchError: If any page cannot be fetched or parsed
        """
        repository = f"{owner}/{repo}"
        url = f"/repos/{owner}/{repo}/actions/artifacts"
        artifacts: list[Artifact] = []
        seen: set[int] = set()
        page = 1

        while True:
            try:
                response = self._send(
                    "GET", url, params={"per_page": self._per_page, "page": page}
                )
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                raise FetchError(
                    f"Failed to list artifacts: HTTP {status_code} {_error_message(e.response)}".rstrip(),
                    repository=repository,
                    status_code=status_code,
                ) from e
            except httpx.HTTPError as e:
                raise FetchError(
                    f"HTTP error while listing artifacts: {e}",
                    repository=repository,
                ) from e

            try:
                data = response.json()
                batch = data.get("artifacts", [])
                parsed = [Artifact.model_validate(item) for item in batch]
            except (ValueError, AttributeError, ValidationError) as e:
                raise FetchError(
                    f"Malformed artifact listing on page {page}: {e}",
                    repository=repository,
                ) from e

            # The listing can shift between requests and repeat an artifact
            for artifact in parsed:
                if artifact.id in seen:
                    logger.debug(f"Skipping duplicate artifact {artifact.id} on page {page}")
                    continue
                seen.add(artifact.id)
                artifacts.append(artifact)

            total_count = data.get("total_count")
            logger.debug(
                f"Fetched page {page} of artifacts for {repository}: "
                f"{len(batch)} items ({len(artifacts)}/{total_count})"
            )

            if len(batch) < self._per_page:
                break
            if total_count is not None and len(artifacts) >= total_count:
                break
            page += 1

        return artifacts

    def delete_artifact(self, owner: str, repo: str, artifact_id: int) -> None:
        """
        Delete one artifact.

        An artifact that is already gone (404) counts as deleted.

        Raises:
            DeletionError: If the API refuses or the request fails
        """
        url = f"/repos/{owner}/{repo}/actions/artifacts/{artifact_id}"
        try:
            self._send("DELETE", url)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code == 404:
                logger.debug(f"Artifact {artifact_id} already deleted")
                return
            raise DeletionError(
                f"HTTP {status_code} {_error_message(e.response)}".rstrip(),
                artifact_id=artifact_id,
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            raise DeletionError(
                f"HTTP error during delete: {e}", artifact_id=artifact_id
            ) from e

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()
