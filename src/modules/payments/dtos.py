"""Payment DTOs."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from modules.payments.cards import mask_card_number


class CardInfo(BaseModel):
    """Card data for a single authorization attempt.  Never persisted."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    card_number: str = Field(default="", repr=False)
    expiration_date: str = ""
    cvv: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("cvv", "cardCode", "card_code"),
    )

    @property
    def masked_number(self) -> str:
        return mask_card_number(self.card_number)


class GatewayOutcome(BaseModel):
    """Normalized gateway result.

    ``indeterminate`` marks a result whose real state at the gateway is
    unknown (timeout); callers must not report it as a decline.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    transaction_id: Optional[str] = None
    auth_code: Optional[str] = None
    reason: Optional[str] = None
    indeterminate: bool = False
