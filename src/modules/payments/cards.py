"""Local card validation, run before any gateway round-trip."""

from __future__ import annotations

import re

from modules.payments.exceptions import CardValidationError

_NON_DIGITS = re.compile(r"\D")
_EXPIRY = re.compile(r"^\d{2}/(\d{2}|\d{4})$")
_CVV = re.compile(r"^\d{3,4}$")

MIN_CARD_LENGTH = 13
MAX_CARD_LENGTH = 19


def normalize_card_number(card_number: str) -> str:
    """Strip spaces, dashes and any other non-digit characters."""
    return _NON_DIGITS.sub("", card_number or "")


def luhn_valid(card_number: str) -> bool:
    """Standard Luhn checksum over a digits-only string."""
    if not card_number or not card_number.isdigit():
        return False
    total = 0
    for position, char in enumerate(reversed(card_number)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def mask_card_number(card_number: str) -> str:
    digits = normalize_card_number(card_number)
    if len(digits) < 4:
        return "****"
    return f"****{digits[-4:]}"


def validate_card(card_number: str, expiration_date: str, cvv: str) -> str:
    """Validate card fields and return the normalized card number.

    Raises:
        CardValidationError: on the first field that fails.
    """
    digits = normalize_card_number(card_number)
    if not MIN_CARD_LENGTH <= len(digits) <= MAX_CARD_LENGTH:
        raise CardValidationError(
            "card_number",
            "Invalid card number length. Please enter a valid card number.",
        )
    if not luhn_valid(digits):
        raise CardValidationError(
            "card_number",
            "Invalid card number. Please check and try again.",
        )
    if not expiration_date or not _EXPIRY.match(expiration_date):
        raise CardValidationError(
            "expiration_date",
            "Invalid expiration date format. Please use MM/YY or MM/YYYY format.",
        )
    if not cvv or not _CVV.match(cvv):
        raise CardValidationError(
            "cvv",
            "Invalid CVV. Please enter a 3 or 4 digit security code.",
        )
    return digits
