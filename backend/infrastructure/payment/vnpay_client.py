"""VNPAY payment gateway client - Implements IGatewayClient port.

Builds signed redirect URLs and verifies redirect callbacks. Both sides
sign the ``&``-joined ``key=value`` pairs, sorted by key, with
HMAC-SHA512 keyed by the merchant hash secret.
"""

import hashlib
import hmac
from datetime import datetime
from decimal import Decimal
from typing import Dict, Mapping, Optional
from urllib.parse import quote
from uuid import UUID

import structlog
from pydantic import ValidationError

from domain.order.core.ports.gateway_client import GatewayCallbackResult
from domain.order.core.value_objects.money import to_minor_units
from infrastructure.config import GatewaySettings
from infrastructure.payment.models import VnpayCallbackPayload

logger = structlog.get_logger(__name__)

API_VERSION = "2.1.0"

RESPONSE_MESSAGES: Dict[str, str] = {
    "00": "Payment successful",
    "07": (
        "Transaction deducted successfully. Transaction is suspected of fraud "
        "(related to gray card/black card)"
    ),
    "09": "Customer's card/account has not registered for InternetBanking service at the bank",
    "10": "Customer entered incorrect card/account information more than 3 times",
    "11": "Payment deadline has expired. Please retry the transaction",
    "12": "Customer's card/account is locked",
    "13": "Customer entered incorrect transaction authentication password (OTP)",
    "24": "Customer canceled the transaction",
    "51": "Customer's account has insufficient balance to make the transaction",
    "65": "Customer's account has exceeded the daily transaction limit",
}
DEFAULT_FAILURE_MESSAGE = "Transaction failed"


def response_message(code: str) -> str:
    return RESPONSE_MESSAGES.get(code, DEFAULT_FAILURE_MESSAGE)


def sign(fields: Mapping[str, str], secret: str) -> str:
    """HMAC-SHA512 (lowercase hex) over the sorted ``key=value`` pairs."""
    data = "&".join(f"{key}={fields[key]}" for key in sorted(fields))
    return hmac.new(secret.encode("utf-8"), data.encode("utf-8"), hashlib.sha512).hexdigest()


def _invalid(reason: str, response_code: str = "", transaction_id: str = "") -> GatewayCallbackResult:
    return GatewayCallbackResult(
        is_valid=False,
        order_id=None,
        response_code=response_code,
        transaction_id=transaction_id,
        message=reason,
    )


class VnpayGatewayClient:
    """
    VNPAY implementation of IGatewayClient.

    Example:
        >>> client = VnpayGatewayClient(GatewaySettings.from_env())
        >>> url = client.create_payment_url(order.id, order.total_amount, "Order 42")
        >>> result = client.validate_callback(request_query_params)
    """

    def __init__(
        self,
        settings: GatewaySettings,
        client_ip: str = "127.0.0.1",
        locale: str = "vn",
    ):
        self._settings = settings
        self._client_ip = client_ip
        self._locale = locale

    def create_payment_url(
        self,
        order_id: UUID,
        amount: Decimal,
        order_info: str,
        created_at: Optional[datetime] = None,
    ) -> str:
        """
        Build the signed redirect URL for an order.

        Args:
            order_id: Order reference, sent as vnp_TxnRef
            amount: Order total; sent in minor units (x100)
            order_info: Free-text description shown by the gateway
            created_at: Request timestamp (defaults to now, local time)
        """
        params = {
            "vnp_Version": API_VERSION,
            "vnp_Command": "pay",
            "vnp_TmnCode": self._settings.tmn_code,
            "vnp_Amount": str(to_minor_units(amount)),
            "vnp_CreateDate": (created_at or datetime.now()).strftime("%Y%m%d%H%M%S"),
            "vnp_CurrCode": "VND",
            "vnp_IpAddr": self._client_ip,
            "vnp_Locale": self._locale,
            "vnp_OrderInfo": order_info,
            "vnp_OrderType": "other",
            "vnp_ReturnUrl": self._settings.return_url,
            "vnp_TxnRef": str(order_id),
        }
        params["vnp_SecureHash"] = sign(params, self._settings.hash_secret)

        query = "&".join(f"{key}={quote(params[key], safe='')}" for key in sorted(params))

        logger.info("payment_url_created", order_id=str(order_id), amount=str(amount))
        return f"{self._settings.base_url}?{query}"

    def validate_callback(self, payload: Mapping[str, str]) -> GatewayCallbackResult:
        """
        Verify a callback's signature and extract its outcome.

        Returns an invalid result (never raises) when required parameters
        are missing, the signature does not match, or vnp_TxnRef is not
        an order UUID.
        """
        try:
            callback = VnpayCallbackPayload.model_validate(dict(payload))
        except ValidationError as e:
            logger.warning("callback_rejected", reason="malformed", errors=e.error_count())
            return _invalid("Malformed callback payload")

        expected = sign(callback.signed_fields(), self._settings.hash_secret)
        if not hmac.compare_digest(expected, callback.vnp_SecureHash.lower()):
            logger.warning("callback_rejected", reason="signature", txn_ref=callback.vnp_TxnRef)
            return _invalid(
                "Invalid callback signature",
                response_code=callback.vnp_ResponseCode,
                transaction_id=callback.vnp_TransactionNo,
            )

        try:
            order_id = UUID(callback.vnp_TxnRef)
        except ValueError:
            logger.warning("callback_rejected", reason="order_id", txn_ref=callback.vnp_TxnRef)
            return _invalid(
                "Invalid order ID format",
                response_code=callback.vnp_ResponseCode,
                transaction_id=callback.vnp_TransactionNo,
            )

        logger.info(
            "callback_verified",
            order_id=str(order_id),
            response_code=callback.vnp_ResponseCode,
            transaction_id=callback.vnp_TransactionNo,
        )
        return GatewayCallbackResult(
            is_valid=True,
            order_id=order_id,
            response_code=callback.vnp_ResponseCode,
            transaction_id=callback.vnp_TransactionNo,
            message=response_message(callback.vnp_ResponseCode),
        )
