import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_card_number_masked_in_free_text(self):
        event_dict = {"event": "test", "data": "charging 4111111111111111 now"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "4111111111111111" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_card_number_with_separators_masked(self):
        event_dict = {"event": "test", "data": "card 4111 1111 1111 1111"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "1111 1111 1111" not in result["data"]

    def test_card_keys_masked(self):
        event_dict = {"event": "test", "cardNumber": "4111111111111111", "cvv": "123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["cardNumber"] == "***MASKED***"
        assert result["cvv"] == "***MASKED***"

    def test_nested_payload_masked(self):
        event_dict = {
            "event": "checkout.persist_failed",
            "payload": {
                "paymentData": {"cardNumber": "4111111111111111", "cardCode": "999"},
                "items": [{"note": "card_code=999"}],
            },
        }
        result = mask_sensitive_data(None, None, event_dict)
        payment = result["payload"]["paymentData"]
        assert payment["cardNumber"] == "***MASKED***"
        assert payment["cardCode"] == "***MASKED***"
        assert "999" not in result["payload"]["items"][0]["note"]

    def test_password_masked(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {
            "event": "order.created",
            "order_number": "ORD250101001",
            "card_last4": "1111",
        }
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD250101001"
        assert result["card_last4"] == "1111"
        assert result["event"] == "order.created"
