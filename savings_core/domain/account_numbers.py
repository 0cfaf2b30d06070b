"""10-digit savings account numbers with a weighted check digit"""

from typing import Callable, Optional

from savings_core.domain.exceptions import (
    AccountPrefixNotConfiguredError,
    InstitutionCodeNotConfiguredError,
    InvalidChecksumBaseLengthError,
    SequenceOverflowError,
)

CHECKSUM_WEIGHTS = (3, 7, 3, 3, 7, 3, 3, 7, 3, 3, 7, 3, 3, 7, 3)
INSTITUTION_CODE_LENGTH = 5
INSTITUTION_LEADING_DIGIT = "9"
PREFIX_LENGTH = 2
SERIAL_LENGTH = 9

PrefixLookup = Callable[[int], Optional[str]]


def _is_digits(value: str) -> bool:
    """ASCII 0-9 only; str.isdigit also accepts other scripts and superscripts"""
    return value.isascii() and value.isdigit()


def calculate_check_digit(base: str) -> int:
    """
    Weighted mod-10 check digit over a 15-digit base.

    Each digit is multiplied by its position's weight, the products summed and
    the digit is (10 - sum % 10) % 10.
    """
    if len(base) != len(CHECKSUM_WEIGHTS) or not _is_digits(base):
        raise InvalidChecksumBaseLengthError(base, expected=len(CHECKSUM_WEIGHTS))

    total = sum(int(digit) * weight for digit, weight in zip(base, CHECKSUM_WEIGHTS))
    return (10 - total % 10) % 10


def build_serial(product_id: int, prefix: str, sequence: int) -> str:
    """prefix + sequence zero-padded to fill 9 digits"""
    if sequence < 1:
        raise ValueError(f"Sequence must be positive, got: {sequence}")

    width = SERIAL_LENGTH - len(prefix)
    padded = f"{sequence:0{width}d}"
    if len(padded) > width:
        raise SequenceOverflowError(product_id, sequence, width)
    return prefix + padded


class AccountNumberSynthesizer:
    """Renders allocated sequences into account numbers for one institution"""

    def __init__(self, institution_code: str | None, prefix_lookup: PrefixLookup):
        self.institution_code = institution_code
        self.prefix_lookup = prefix_lookup

    def _institution_segment(self) -> str:
        code = self.institution_code
        if code is None or len(code) != INSTITUTION_CODE_LENGTH or not _is_digits(code):
            raise InstitutionCodeNotConfiguredError(code)
        return INSTITUTION_LEADING_DIGIT + code

    def _prefix_for(self, product_id: int) -> str:
        prefix = self.prefix_lookup(product_id)
        if prefix is None or len(prefix) != PREFIX_LENGTH or not _is_digits(prefix):
            raise AccountPrefixNotConfiguredError(product_id, prefix)
        return prefix

    def synthesize(self, product_id: int, sequence: int) -> str:
        """
        Build the account number for a product's allocated sequence.

        Example:
            institution 50547, prefix "02", sequence 1
            serial "020000001", base "950547" + serial, check digit 7
            → "0200000017"
        """
        institution_segment = self._institution_segment()
        serial = build_serial(product_id, self._prefix_for(product_id), sequence)
        check_digit = calculate_check_digit(institution_segment + serial)
        return f"{serial}{check_digit}"
