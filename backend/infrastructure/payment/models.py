"""Pydantic models for VNPAY redirect callbacks.

The gateway appends these as query parameters to the return URL. Values
arrive as strings; unknown ``vnp_*`` parameters are kept because they
take part in the signature.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

HASH_FIELDS = frozenset({"vnp_SecureHash", "vnp_SecureHashType"})


class VnpayCallbackPayload(BaseModel):
    """Callback parameters sent by VNPAY after a payment attempt."""

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    vnp_TxnRef: str = Field(..., min_length=1, description="Merchant reference (order UUID)")
    vnp_ResponseCode: str = Field(..., min_length=1, description="'00' when payment succeeded")
    vnp_SecureHash: str = Field(..., min_length=1, description="HMAC-SHA512 hex digest")
    vnp_TransactionNo: str = Field(default="", description="Gateway transaction number")
    vnp_Amount: str = Field(default="", description="Amount in minor units (x100)")
    vnp_TmnCode: str = Field(default="")
    vnp_BankCode: str = Field(default="")
    vnp_BankTranNo: str = Field(default="")
    vnp_CardType: str = Field(default="")
    vnp_OrderInfo: str = Field(default="")
    vnp_PayDate: str = Field(default="")
    vnp_TransactionStatus: str = Field(default="")
    vnp_SecureHashType: str = Field(default="")

    def signed_fields(self) -> Dict[str, str]:
        """
        Parameters covered by the signature: every non-empty ``vnp_*``
        value except the hash fields themselves.
        """
        values: Dict[str, Any] = self.model_dump()
        return {
            key: str(value)
            for key, value in values.items()
            if key.startswith("vnp_") and key not in HASH_FIELDS and value not in (None, "")
        }
