"""Stakeholder fee splits - share calculation and distribution"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List

from savings_core.domain.exceptions import ParameterError, SplitExceedsFeeError, SplitValidationError
from savings_core.domain.models import FeeSplitAudit, FeeSplitDetail, FeeTransaction, StakeholderSplit
from savings_core.domain.money import HUNDRED, ZERO, percentage_of, to_decimal
from savings_core.domain.schemas import SplitUpdate


class SplitError(str, Enum):
    PERCENTAGE_EXCEEDS_100 = "error.msg.fee.split.total.percentage.exceeds.100"
    FLAT_EXCEEDS_FEE = "error.msg.fee.split.total.flat.amount.exceeds.fee"
    COMBINED_EXCEEDS_FEE = "error.msg.fee.split.total.exceeds.fee"
    NEGATIVE_VALUE = "error.msg.fee.split.value.negative"


def calculate_share(total_fee, split: StakeholderSplit, decimal_places: int = 2) -> Decimal:
    """
    Amount of total_fee owed to one stakeholder.

    Percentage splits are rounded half-up to minor units; flat splits are taken
    as-is and may not exceed the fee.
    """
    total_fee = to_decimal(total_fee)
    if split.is_percentage:
        return percentage_of(total_fee, split.value, decimal_places)

    if split.value > total_fee:
        raise SplitExceedsFeeError(
            [
                ParameterError(
                    parameter="splitValue",
                    code=SplitError.FLAT_EXCEEDS_FEE.value,
                    message=f"Flat split {split.value} for {split.stakeholder_ref} exceeds fee {total_fee}",
                    value=split.value,
                )
            ]
        )
    return split.value


def update_split(split: StakeholderSplit, request: SplitUpdate) -> Dict[str, Any]:
    """Apply only the requested fields that differ; empty result means nothing changed"""
    return split.update(request.requested_changes())


def validate_split_totals(splits: Iterable[StakeholderSplit], total_fee) -> List[ParameterError]:
    """Check active splits against the fee they will be taken from"""
    total_fee = to_decimal(total_fee)
    errors: List[ParameterError] = []
    total_percentage = ZERO
    total_flat = ZERO

    for split in splits:
        if not split.active:
            continue
        if split.value < ZERO:
            errors.append(
                ParameterError(
                    parameter="splitValue",
                    code=SplitError.NEGATIVE_VALUE.value,
                    message=f"Split value for {split.stakeholder_ref} cannot be negative",
                    value=split.value,
                )
            )
            continue
        if split.is_percentage:
            total_percentage += split.value
        else:
            total_flat += split.value

    if total_percentage > HUNDRED:
        errors.append(
            ParameterError(
                parameter="splitValue",
                code=SplitError.PERCENTAGE_EXCEEDS_100.value,
                message="Total percentage splits cannot exceed 100%",
                value=total_percentage,
            )
        )
    if total_flat > total_fee:
        errors.append(
            ParameterError(
                parameter="splitValue",
                code=SplitError.FLAT_EXCEEDS_FEE.value,
                message="Total flat amount splits cannot exceed total fee amount",
                value=total_flat,
            )
        )
    elif total_percentage <= HUNDRED and total_fee * total_percentage / HUNDRED + total_flat > total_fee:
        errors.append(
            ParameterError(
                parameter="splitValue",
                code=SplitError.COMBINED_EXCEEDS_FEE.value,
                message="Percentage and flat amount splits together cannot exceed total fee amount",
                value=total_flat,
            )
        )
    return errors


def distribute_fee(
    fee_transaction: FeeTransaction,
    splits: Iterable[StakeholderSplit],
    charge_ref: str | None = None,
    split_date: date | None = None,
) -> FeeSplitAudit:
    """
    Compute every active stakeholder's share of a fee.

    Half-up rounding can push the percentage shares a few minor units past the
    fee; the overshoot is taken back from the last percentage shares so the
    distributed total never exceeds the fee.
    """
    active = [s for s in splits if s.active]
    fee = fee_transaction.amount
    decimal_places = fee_transaction.currency.decimal_places

    errors = validate_split_totals(active, fee)
    if errors:
        raise SplitValidationError(errors)

    amounts = [calculate_share(fee, split, decimal_places) for split in active]

    overshoot = sum(amounts, ZERO) - fee
    for index in reversed(range(len(active))):
        if overshoot <= ZERO:
            break
        if not active[index].is_percentage:
            continue
        taken = min(amounts[index], overshoot)
        amounts[index] -= taken
        overshoot -= taken

    details = [
        FeeSplitDetail(
            stakeholder_ref=split.stakeholder_ref,
            kind=split.kind,
            amount=amount,
            percentage=split.value if split.is_percentage else None,
            gl_account_ref=split.gl_account_ref,
        )
        for split, amount in zip(active, amounts)
    ]

    return FeeSplitAudit(
        transaction_ref=fee_transaction.transaction_ref,
        charge_ref=charge_ref,
        total_fee=fee,
        split_date=split_date or fee_transaction.transaction_date,
        details=details,
    )
