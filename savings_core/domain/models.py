"""Domain models - pure Python dataclasses representing fee, tax, limit and account entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple

from savings_core.domain.money import Currency, ZERO
from savings_core.utils.date_utils import occurs_between


def _apply_changes(entity: Any, requested: Dict[str, Any]) -> Dict[str, Any]:
    """Apply requested field values, returning only the ones that differ"""
    actual_changes: Dict[str, Any] = {}
    for name, new_value in requested.items():
        if getattr(entity, name) != new_value:
            actual_changes[name] = new_value
    for name, new_value in actual_changes.items():
        setattr(entity, name, new_value)
    return actual_changes


@dataclass
class Slab:
    """One fee tier of a charge's schedule; upper_bound None means unbounded"""

    lower_bound: Decimal
    upper_bound: Decimal | None
    fee_value: Decimal

    def contains(self, amount: Decimal) -> bool:
        return self.lower_bound <= amount and (self.upper_bound is None or amount <= self.upper_bound)

    def is_inverted(self) -> bool:
        return self.upper_bound is not None and self.lower_bound > self.upper_bound

    def is_period_same(self, other: "Slab") -> bool:
        return self.lower_bound == other.lower_bound and self.upper_bound == other.upper_bound

    def overlaps(self, other: "Slab") -> bool:
        """Ranges overlap unless one ends strictly before the other starts"""
        if self.upper_bound is not None and self.upper_bound < other.lower_bound:
            return False
        if other.upper_bound is not None and other.upper_bound < self.lower_bound:
            return False
        return True

    def update(self, requested: Dict[str, Any]) -> Dict[str, Any]:
        return _apply_changes(self, requested)


class SplitKind(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT_AMOUNT = "FLAT_AMOUNT"


@dataclass
class StakeholderSplit:
    """Rule distributing part of a charge's fee to one stakeholder"""

    stakeholder_ref: str
    kind: SplitKind
    value: Decimal
    active: bool = True
    gl_account_ref: str | None = None

    @property
    def is_percentage(self) -> bool:
        return self.kind == SplitKind.PERCENTAGE

    @property
    def is_flat_amount(self) -> bool:
        return self.kind == SplitKind.FLAT_AMOUNT

    def update(self, requested: Dict[str, Any]) -> Dict[str, Any]:
        return _apply_changes(self, requested)


@dataclass(frozen=True)
class FeeTransaction:
    """Posted fee that VAT and payment aggregation are computed from"""

    transaction_ref: str
    amount: Decimal
    transaction_date: date
    currency: Currency


@dataclass(frozen=True)
class TaxRateHistory:
    """Rate that applied to a tax component between two dates"""

    percentage: Decimal
    start_date: date
    end_date: date | None = None


@dataclass(frozen=True)
class TaxComponent:
    """Named tax rate, e.g. VAT, with its previous rates"""

    name: str
    percentage: Decimal
    history: Tuple[TaxRateHistory, ...] = ()

    def percentage_on(self, on: date | None) -> Decimal:
        """Rate effective on a date; the current rate when no history entry covers it"""
        if on is not None:
            for entry in self.history:
                if occurs_between(on, entry.start_date, entry.end_date):
                    return entry.percentage
        return self.percentage


@dataclass(frozen=True)
class VatComponentAmount:
    name: str
    percentage: Decimal
    amount: Decimal


@dataclass(frozen=True)
class VatApplicationResult:
    """Outcome of applying VAT on a fee transaction"""

    applied: bool = False
    amount: Decimal = ZERO
    percentage: Decimal = ZERO
    source_fee_transaction_ref: str | None = None
    effective_date: date | None = None
    backdated: bool = False
    components: Tuple[VatComponentAmount, ...] = ()

    @property
    def requires_balance_recompute(self) -> bool:
        # Independent of whether VAT was applied
        return self.backdated


@dataclass(frozen=True)
class PaymentResult:
    """Fee + VAT outcome returned to the caller"""

    fee_transaction_ref: str | None
    fee_amount: Decimal
    vat_amount: Decimal
    vat_applied: bool
    total_amount: Decimal
    net_amount: Decimal
    successful: bool
    message: str

    @property
    def has_vat(self) -> bool:
        return self.vat_applied and self.vat_amount > ZERO


@dataclass(frozen=True)
class FeeSplitDetail:
    """Share of a fee credited to one stakeholder"""

    stakeholder_ref: str
    kind: SplitKind
    amount: Decimal
    percentage: Decimal | None = None
    gl_account_ref: str | None = None


@dataclass(frozen=True)
class FeeSplitAudit:
    """Record of one fee distribution across stakeholders"""

    transaction_ref: str
    charge_ref: str | None
    total_fee: Decimal
    split_date: date
    details: List[FeeSplitDetail] = field(default_factory=list)

    @property
    def distributed_amount(self) -> Decimal:
        return sum((d.amount for d in self.details), ZERO)

    @property
    def undistributed_amount(self) -> Decimal:
        return self.total_fee - self.distributed_amount


@dataclass(frozen=True)
class ChargeSettlement:
    """Everything produced when a charge is applied to a transaction"""

    payment: PaymentResult
    vat: VatApplicationResult
    split_audit: FeeSplitAudit


@dataclass(frozen=True)
class LimitProfile:
    """Deposit limits enforced for one client classification"""

    classification_ref: int
    max_single_deposit_amount: Decimal
    balance_cumulative_limit: Decimal
    currency: Currency
    name: str = ""


class LimitBreach(str, Enum):
    MAX_SINGLE_DEPOSIT = "Max Single Deposit Amount Limit"
    BALANCE_CUMULATIVE = "Balance Cumulative Limit"


class DebitBlockAction(str, Enum):
    BLOCK = "BLOCK_DEBIT"
    UNBLOCK = "UNBLOCK_DEBIT"
