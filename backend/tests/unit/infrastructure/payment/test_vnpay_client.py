"""Unit tests for VnpayGatewayClient."""

from datetime import datetime
from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit
from uuid import uuid4

import pytest

from infrastructure.config import GatewaySettings
from infrastructure.payment import VnpayGatewayClient
from infrastructure.payment.vnpay_client import response_message, sign

SECRET = "TESTSECRET"


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(
        base_url="https://sandbox.vnpayment.vn/paymentv2/vpcpay.html",
        tmn_code="TMN01",
        hash_secret=SECRET,
        return_url="https://shop.test/payment/return",
    )


@pytest.fixture
def client(settings) -> VnpayGatewayClient:
    return VnpayGatewayClient(settings)


def _signed(fields, secret: str = SECRET):
    payload = dict(fields)
    payload["vnp_SecureHash"] = sign(fields, secret)
    return payload


class TestSign:
    """Test the signature helper."""

    def test_order_independent(self) -> None:
        assert sign({"b": "2", "a": "1"}, SECRET) == sign({"a": "1", "b": "2"}, SECRET)

    def test_lowercase_sha512_hex(self) -> None:
        digest = sign({"a": "1"}, SECRET)
        assert len(digest) == 128
        assert digest == digest.lower()

    def test_secret_matters(self) -> None:
        assert sign({"a": "1"}, SECRET) != sign({"a": "1"}, "OTHER")


class TestCreatePaymentUrl:
    """Test redirect URL construction."""

    def test_url_carries_signed_params(self, client, settings) -> None:
        order_id = uuid4()

        url = client.create_payment_url(
            order_id, Decimal("18.00"), "Payment for order", created_at=datetime(2026, 10, 17, 9, 30, 0)
        )

        parts = urlsplit(url)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == settings.base_url
        params = dict(parse_qsl(parts.query))
        assert params["vnp_TxnRef"] == str(order_id)
        assert params["vnp_Amount"] == "1800"
        assert params["vnp_CreateDate"] == "20261017093000"
        assert params["vnp_TmnCode"] == "TMN01"
        assert params["vnp_OrderInfo"] == "Payment for order"

        secure_hash = params.pop("vnp_SecureHash")
        assert secure_hash == sign(params, SECRET)

    def test_keys_sorted(self, client) -> None:
        url = client.create_payment_url(uuid4(), Decimal("5.00"), "x")
        keys = [key for key, _ in parse_qsl(urlsplit(url).query)]
        assert keys == sorted(keys)


class TestValidateCallback:
    """Test callback verification."""

    def test_valid_success(self, client) -> None:
        order_id = uuid4()
        payload = _signed(
            {"vnp_TxnRef": str(order_id), "vnp_ResponseCode": "00", "vnp_TransactionNo": "14000001", "vnp_Amount": "1800"}
        )

        result = client.validate_callback(payload)

        assert result.is_valid
        assert result.is_success
        assert result.order_id == order_id
        assert result.transaction_id == "14000001"
        assert result.message == "Payment successful"

    def test_valid_failure(self, client) -> None:
        payload = _signed({"vnp_TxnRef": str(uuid4()), "vnp_ResponseCode": "24", "vnp_TransactionNo": "1"})

        result = client.validate_callback(payload)

        assert result.is_valid
        assert not result.is_success
        assert result.message == "Customer canceled the transaction"

    def test_uppercase_hash_accepted(self, client) -> None:
        payload = _signed({"vnp_TxnRef": str(uuid4()), "vnp_ResponseCode": "00"})
        payload["vnp_SecureHash"] = payload["vnp_SecureHash"].upper()

        assert client.validate_callback(payload).is_valid

    def test_hash_type_not_signed(self, client) -> None:
        payload = _signed({"vnp_TxnRef": str(uuid4()), "vnp_ResponseCode": "00"})
        payload["vnp_SecureHashType"] = "HmacSHA512"

        assert client.validate_callback(payload).is_valid

    def test_tampered_payload(self, client) -> None:
        payload = _signed({"vnp_TxnRef": str(uuid4()), "vnp_ResponseCode": "24"})
        payload["vnp_ResponseCode"] = "00"

        result = client.validate_callback(payload)

        assert not result.is_valid
        assert result.order_id is None
        assert result.message == "Invalid callback signature"

    def test_wrong_secret(self, client) -> None:
        payload = _signed({"vnp_TxnRef": str(uuid4()), "vnp_ResponseCode": "00"}, secret="OTHER")
        assert not client.validate_callback(payload).is_valid

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"vnp_TxnRef": "x", "vnp_ResponseCode": "00"},
            {"vnp_ResponseCode": "00", "vnp_SecureHash": "abc"},
        ],
    )
    def test_malformed(self, client, payload) -> None:
        result = client.validate_callback(payload)

        assert not result.is_valid
        assert result.message == "Malformed callback payload"

    def test_non_uuid_reference(self, client) -> None:
        payload = _signed({"vnp_TxnRef": "order-42", "vnp_ResponseCode": "00"})

        result = client.validate_callback(payload)

        assert not result.is_valid
        assert result.message == "Invalid order ID format"


@pytest.mark.parametrize(
    "code,expected",
    [("00", "Payment successful"), ("51", "Customer's account has insufficient balance to make the transaction"), ("99", "Transaction failed")],
)
def test_response_message(code, expected) -> None:
    assert response_message(code) == expected
