"""Unit tests for account number synthesis"""

import pytest
from savings_core.domain.account_numbers import AccountNumberSynthesizer, build_serial, calculate_check_digit
from savings_core.domain.exceptions import (
    AccountPrefixNotConfiguredError,
    InstitutionCodeNotConfiguredError,
    InvalidChecksumBaseLengthError,
    SequenceOverflowError,
)


def synthesizer(institution_code="50547", prefix="02") -> AccountNumberSynthesizer:
    return AccountNumberSynthesizer(institution_code, lambda product_id: prefix)


def test_calculate_check_digit():
    """Test weighted sum 143 gives check digit 7"""
    assert calculate_check_digit("950547020000001") == 7


def test_calculate_check_digit_zero_remainder():
    assert calculate_check_digit("000000000000000") == 0


def test_calculate_check_digit_invalid_base():
    with pytest.raises(InvalidChecksumBaseLengthError):
        calculate_check_digit("95054702000001")
    with pytest.raises(InvalidChecksumBaseLengthError):
        calculate_check_digit("95054702000000A")
    with pytest.raises(InvalidChecksumBaseLengthError):
        calculate_check_digit("95054702000000²")


def test_synthesize_known_account_number():
    """Test institution 50547, prefix 02, sequence 1"""
    assert synthesizer().synthesize(product_id=1, sequence=1) == "0200000017"


def test_synthesize_next_sequence():
    assert synthesizer().synthesize(product_id=1, sequence=2) == "0200000024"


def test_build_serial_pads_to_nine_digits():
    assert build_serial(1, "02", 1) == "020000001"
    assert build_serial(1, "02", 9_999_999) == "029999999"


def test_build_serial_overflow():
    """Test sequences past seven digits are rejected, not truncated"""
    with pytest.raises(SequenceOverflowError) as exc_info:
        build_serial(1, "02", 10_000_000)

    assert exc_info.value.sequence == 10_000_000


def test_build_serial_non_positive_sequence():
    with pytest.raises(ValueError):
        build_serial(1, "02", 0)


@pytest.mark.parametrize("institution_code", [None, "", "5054", "505470", "5054A", "٥٠٥٤٧", "5054²"])
def test_invalid_institution_code(institution_code):
    with pytest.raises(InstitutionCodeNotConfiguredError):
        synthesizer(institution_code=institution_code).synthesize(product_id=1, sequence=1)


@pytest.mark.parametrize("prefix", [None, "2", "002", "AB", "٠٢", "²2"])
def test_invalid_prefix(prefix):
    with pytest.raises(AccountPrefixNotConfiguredError) as exc_info:
        synthesizer(prefix=prefix).synthesize(product_id=7, sequence=1)

    assert exc_info.value.product_id == 7
