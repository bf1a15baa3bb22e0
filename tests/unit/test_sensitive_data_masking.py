import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_email_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "recipient": "jane.buyer+shop@example.com"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "jane.buyer" not in result["recipient"]
        assert result["recipient"] == "***MASKED***"

    def test_card_number_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "paid with 4111 1111 1111 1111 today"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "4111 1111" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {
            "event": "order.status_changed",
            "order_number": "ORD-20250301-ABC123",
            "to_status": "SHIPPED",
        }
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD-20250301-ABC123"
        assert result["to_status"] == "SHIPPED"
        assert result["event"] == "order.status_changed"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "order_count": 4111111111111111}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_count"] == 4111111111111111
