"""Domain-specific exceptions"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List


@dataclass(frozen=True)
class ParameterError:
    """Single field-attributed validation failure"""

    parameter: str
    code: str
    message: str
    value: Any = None


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Configuration needed by the current operation is missing or malformed"""

    def __init__(self, message: str, field: str, context: Dict[str, Any] | None = None):
        self.field = field
        self.context = context or {}
        super().__init__(message)


class NoMatchingSlabError(ConfigurationError):
    """No slab in the fee schedule covers the amount"""

    def __init__(self, amount: Decimal):
        self.amount = amount
        super().__init__(f"No fee slab covers amount {amount}", field="chartSlabs", context={"amount": amount})


class InstitutionCodeNotConfiguredError(ConfigurationError):
    """Institution code is absent or not exactly 5 digits"""

    def __init__(self, value: str | None):
        super().__init__(
            "Institution code not available",
            field="institutionCode",
            context={"value": value},
        )


class AccountPrefixNotConfiguredError(ConfigurationError):
    """Savings product has no usable 2-digit account number prefix"""

    def __init__(self, product_id: int, prefix: str | None):
        self.product_id = product_id
        super().__init__(
            f"Account number prefix not set for product {product_id}",
            field="accountNumberPrefix",
            context={"product_id": product_id, "prefix": prefix},
        )


class InvalidChecksumBaseLengthError(ConfigurationError):
    """Checksum base is not exactly 15 digits"""

    def __init__(self, base: str, expected: int):
        super().__init__(
            f"Account number checksum base length is invalid, expected {expected} digits",
            field="checksumBase",
            context={"base": base, "expected": expected},
        )


class CurrencyMismatchError(ConfigurationError):
    """Two monetary values in one calculation use different currencies"""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Currency mismatch: expected {expected}, got {actual}",
            field="currency",
            context={"expected": expected, "actual": actual},
        )


class LimitProfileNotFoundError(ConfigurationError):
    """Classification is mapped to a limit setting that does not exist"""

    def __init__(self, classification_ref: int, limit_setting_id: int | None):
        super().__init__(
            f"Transaction limit setting {limit_setting_id} mapped to classification {classification_ref} not found",
            field="globalLimitId",
            context={"classification_ref": classification_ref, "limit_setting_id": limit_setting_id},
        )


class SequenceOverflowError(DomainException):
    """Allocated sequence no longer fits the zero-padded serial width"""

    def __init__(self, product_id: int, sequence: int, width: int):
        self.product_id = product_id
        self.sequence = sequence
        super().__init__(f"Sequence {sequence} for product {product_id} exceeds {width} digits")


class AllocationFailureError(DomainException):
    """Atomic sequence upsert did not return a value"""

    pass


class ValidationError(DomainException):
    """User-supplied data failed one or more field-attributed checks"""

    def __init__(self, errors: List[ParameterError]):
        self.errors = list(errors)
        summary = "; ".join(f"{e.parameter}: {e.message}" for e in self.errors)
        super().__init__(f"Validation errors exist: {summary}")


class ScheduleValidationError(ValidationError):
    """Fee schedule slabs overlap, leave gaps or have inverted ranges"""

    pass


class SplitValidationError(ValidationError):
    """Stakeholder splits cannot be distributed over the fee"""

    pass


class SplitExceedsFeeError(SplitValidationError):
    """Flat split is larger than the fee it is taken from"""

    pass
