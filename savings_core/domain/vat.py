"""VAT on fees - single rate and tax-group application"""

from decimal import Decimal
from typing import List, Sequence

from savings_core.domain.models import FeeTransaction, TaxComponent, VatApplicationResult, VatComponentAmount
from savings_core.domain.money import ZERO, percentage_of, to_decimal


def _not_applied(fee_transaction: FeeTransaction, backdated: bool) -> VatApplicationResult:
    return VatApplicationResult(
        applied=False,
        amount=ZERO,
        percentage=ZERO,
        source_fee_transaction_ref=fee_transaction.transaction_ref,
        effective_date=fee_transaction.transaction_date,
        backdated=backdated,
    )


def apply_vat(
    fee_transaction: FeeTransaction,
    vat_percentage,
    exempt: bool = False,
    backdated: bool = False,
) -> VatApplicationResult:
    """
    Apply a single VAT rate to a fee.

    A zero rate or an exempt charge yields a result with applied=False and a
    zero amount rather than an error. backdated is recorded as given by the
    caller.
    """
    vat_percentage = to_decimal(vat_percentage)
    if vat_percentage < ZERO:
        raise ValueError(f"VAT percentage cannot be negative, got: {vat_percentage}")

    if exempt or vat_percentage == ZERO:
        return _not_applied(fee_transaction, backdated)

    amount = percentage_of(fee_transaction.amount, vat_percentage, fee_transaction.currency.decimal_places)
    return VatApplicationResult(
        applied=True,
        amount=amount,
        percentage=vat_percentage,
        source_fee_transaction_ref=fee_transaction.transaction_ref,
        effective_date=fee_transaction.transaction_date,
        backdated=backdated,
        components=(VatComponentAmount(name="VAT", percentage=vat_percentage, amount=amount),),
    )


def apply_tax_group(
    fee_transaction: FeeTransaction,
    components: Sequence[TaxComponent],
    exempt: bool = False,
    backdated: bool = False,
) -> VatApplicationResult:
    """
    Apply every component of a charge's tax group to a fee.

    Each component uses the rate effective on the fee's date and is rounded on
    its own before the amounts are summed.
    """
    if exempt or not components:
        return _not_applied(fee_transaction, backdated)

    decimal_places = fee_transaction.currency.decimal_places
    component_amounts: List[VatComponentAmount] = []
    for component in components:
        rate = component.percentage_on(fee_transaction.transaction_date)
        if rate < ZERO:
            raise ValueError(f"Tax component {component.name} has a negative rate: {rate}")
        component_amounts.append(
            VatComponentAmount(
                name=component.name,
                percentage=rate,
                amount=percentage_of(fee_transaction.amount, rate, decimal_places),
            )
        )

    total: Decimal = sum((c.amount for c in component_amounts), ZERO)
    if total <= ZERO:
        return _not_applied(fee_transaction, backdated)

    return VatApplicationResult(
        applied=True,
        amount=total,
        percentage=sum((c.percentage for c in component_amounts), ZERO),
        source_fee_transaction_ref=fee_transaction.transaction_ref,
        effective_date=fee_transaction.transaction_date,
        backdated=backdated,
        components=tuple(component_amounts),
    )
