"""Charge settlement - fee lookup, stakeholder split, VAT and payment result"""

from datetime import date
from typing import Iterable, Optional, Sequence

from savings_core.config import settings
from savings_core.domain.exceptions import NoMatchingSlabError
from savings_core.domain.models import ChargeSettlement, FeeTransaction, StakeholderSplit, TaxComponent
from savings_core.domain.money import Currency, quantize_money
from savings_core.domain.payments import aggregate_payment
from savings_core.domain.slabs import SlabTable
from savings_core.domain.splits import distribute_fee
from savings_core.domain.vat import apply_tax_group, apply_vat
from savings_core.infrastructure.observability.logging import log_charge_settled
from savings_core.infrastructure.observability.metrics import record_charge, unmatched_slab_counter
from savings_core.utils.date_utils import is_backdated


def default_currency() -> Currency:
    return Currency(settings.currency_code, settings.currency_decimal_places)


def settle_charge(
    transaction_amount,
    schedule: SlabTable,
    splits: Iterable[StakeholderSplit],
    *,
    transaction_ref: str,
    transaction_date: date,
    posting_date: date,
    charge_ref: Optional[str] = None,
    currency: Optional[Currency] = None,
    tax_components: Sequence[TaxComponent] = (),
    vat_percentage=None,
    vat_exempt: bool = False,
) -> ChargeSettlement:
    """
    Apply a slab-priced charge to a transaction.

    Flow:
    1. Resolve the fee from the schedule for the transaction amount
    2. Distribute the fee over the charge's active stakeholder splits
    3. Apply VAT: the tax group when one is given, else the single rate
    4. Aggregate fee + VAT into the payment result

    A transaction dated before its posting date is settled as backdated.

    Raises:
        NoMatchingSlabError: schedule does not cover the amount
        SplitValidationError: splits cannot be taken from the fee
    """
    currency = currency or default_currency()

    try:
        fee_value = schedule.resolve(transaction_amount)
    except NoMatchingSlabError:
        unmatched_slab_counter.inc()
        raise

    fee_transaction = FeeTransaction(
        transaction_ref=transaction_ref,
        amount=quantize_money(fee_value, currency.decimal_places),
        transaction_date=transaction_date,
        currency=currency,
    )
    backdated = is_backdated(transaction_date, posting_date)

    split_audit = distribute_fee(fee_transaction, splits, charge_ref=charge_ref, split_date=posting_date)

    if tax_components or vat_percentage is None:
        vat = apply_tax_group(fee_transaction, tax_components, exempt=vat_exempt, backdated=backdated)
    else:
        vat = apply_vat(fee_transaction, vat_percentage, exempt=vat_exempt, backdated=backdated)

    payment = aggregate_payment(fee_transaction, vat)

    record_charge(vat.applied)
    log_charge_settled(
        transaction_ref,
        charge_ref,
        payment.fee_amount,
        payment.vat_amount,
        len(split_audit.details),
        backdated,
    )

    return ChargeSettlement(payment=payment, vat=vat, split_audit=split_audit)
