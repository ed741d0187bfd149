import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_email_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "contact ana@example.com today"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "ana@example.com" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_phone_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "phone": "+55 11 91234-0001"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["phone"] == "***MASKED***"

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
            "event": "order.created",
            "order_number": "ORD-000001",
            "timestamp": "2026-03-01T12:00:00.000000Z",
        }
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD-000001"
        assert result["timestamp"] == "2026-03-01T12:00:00.000000Z"
        assert result["event"] == "order.created"
