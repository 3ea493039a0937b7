"""
Tests for solapi.exceptions module.
"""
from solapi.exceptions import (
    MessageNotReceivedError,
    SolapiAPIError,
    SolapiConnectionError,
    SolapiDataError,
    SolapiError,
    ValidationError,
)


class TestSolapiError:
    """Tests for the SolapiError hierarchy."""

    def test_message_only(self):
        assert str(SolapiError("Request failed")) == "Request failed"

    def test_message_with_details(self):
        assert str(SolapiError("Request failed", "timeout")) == "Request failed: timeout"

    def test_subclasses(self):
        for exc_class in (SolapiConnectionError, SolapiAPIError, SolapiDataError):
            assert issubclass(exc_class, SolapiError)
        assert issubclass(MessageNotReceivedError, SolapiError)

    def test_api_error_fields(self):
        error = SolapiAPIError("API returned 403", "Forbidden", status_code=403, error_code="Forbidden")
        assert error.status_code == 403
        assert error.error_code == "Forbidden"

    def test_connection_error_retry_after(self):
        assert SolapiConnectionError("timeout", retry_after=5).retry_after == 5

    def test_data_error_fields(self):
        error = SolapiDataError("Invalid response", expected="list", got="dict")
        assert (error.expected, error.got) == ("list", "dict")


class TestMessageNotReceivedError:
    """Tests for MessageNotReceivedError."""

    def test_failed_list_and_count(self):
        failed = [{"to": "01000000000", "statusCode": "1062"}]
        error = MessageNotReceivedError(failed)

        assert error.failed_message_list == failed
        assert error.total_count == 1
        assert "1 messages failed" in str(error)

    def test_list_is_copied(self):
        failed = [{"to": "01000000000"}]
        error = MessageNotReceivedError(failed)
        failed.append({"to": "01000000001"})

        assert error.total_count == 1


class TestValidationError:
    """Tests for ValidationError."""

    def test_not_a_solapi_error(self):
        """Input errors are raised before any request and stay separate."""
        assert not issubclass(ValidationError, SolapiError)

    def test_str_with_value(self):
        error = ValidationError("limit", "Cannot exceed 500", 1000)
        assert str(error) == "limit: Cannot exceed 500 (got: 1000)"

    def test_str_without_value(self):
        assert str(ValidationError("group_id", "Identifier is required")) == "group_id: Identifier is required"
