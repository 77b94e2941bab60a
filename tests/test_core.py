"""Tests for the result type and exception hierarchy."""

import pytest

from artifact_evictor.core import (
    ConfigurationError,
    ConsistencyError,
    DeletionError,
    Err,
    EvictorError,
    FetchError,
    Ok,
    format_exception,
)
from artifact_evictor.core.exceptions import is_retriable_status


class TestResult:
    """Tests for Ok and Err."""

    def test_ok(self) -> None:
        result = Ok(3)
        assert result.ok is True
        assert result.unwrap() == 3
        assert result.map(lambda v: v * 2) == Ok(6)

    def test_err(self) -> None:
        error = ConfigurationError("bad")
        result = Err(error)
        assert result.ok is False
        assert result.map(lambda v: v * 2) is result
        with pytest.raises(ConfigurationError):
            result.unwrap()

    def test_pattern_matching(self) -> None:
        """Results can be destructured with match."""

        def describe(result) -> str:
            match result:
                case Ok(value=value):
                    return f"ok:{value}"
                case Err(error=error):
                    return f"err:{error.message}"
            return "unreachable"

        assert describe(Ok(1)) == "ok:1"
        assert describe(Err(FetchError("down"))) == "err:down"

    def test_immutable(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_all_inherit_from_base(self) -> None:
        for cls in (ConfigurationError, FetchError, DeletionError, ConsistencyError):
            assert issubclass(cls, EvictorError)

    def test_details_in_str(self) -> None:
        error = FetchError("Failed", repository="octo/widgets", status_code=401)
        assert str(error) == "Failed (repository=octo/widgets, status_code=401)"
        assert error.status_code == 401

    def test_plain_message(self) -> None:
        assert str(EvictorError("plain")) == "plain"

    def test_deletion_error_fields(self) -> None:
        error = DeletionError("HTTP 403", artifact_id=5, status_code=403)
        assert error.message == "HTTP 403"
        assert error.details == {"artifact_id": 5, "status_code": 403}
        assert str(error) == "HTTP 403 (artifact_id=5, status_code=403)"

    def test_configuration_error_fields(self) -> None:
        error = ConfigurationError("missing", env_var="GITHUB_TOKEN")
        assert error.env_var == "GITHUB_TOKEN"
        assert error.details == {"env_var": "GITHUB_TOKEN"}

    def test_consistency_error_sizes(self) -> None:
        error = ConsistencyError("broken", current_size_bytes=300, max_size_bytes=100)
        assert error.details == {"current_size_bytes": 300, "max_size_bytes": 100}

    def test_format_exception(self) -> None:
        assert format_exception(EvictorError("x")) == "x"
        assert format_exception(ValueError("y")) == "ValueError: y"

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [(429, True), (502, True), (503, True), (504, True), (500, False), (404, False), (None, False)],
    )
    def test_is_retriable_status(self, status_code, expected: bool) -> None:
        assert is_retriable_status(status_code) is expected
