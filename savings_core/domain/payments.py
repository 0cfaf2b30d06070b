"""Payment result aggregation - fee plus optional VAT"""

from savings_core.domain.models import FeeTransaction, PaymentResult, VatApplicationResult
from savings_core.domain.money import ZERO


def aggregate_payment(
    fee_transaction: FeeTransaction | None,
    vat_result: VatApplicationResult | None,
) -> PaymentResult:
    """
    Combine a fee transaction and its VAT result for reporting.

    total = fee + VAT (only when VAT was applied), net = fee. Inputs are not
    modified and nothing is persisted.
    """
    successful = fee_transaction is not None
    fee_amount = fee_transaction.amount if successful else ZERO
    vat_applied = vat_result is not None and vat_result.applied
    vat_amount = vat_result.amount if vat_applied else ZERO
    total_amount = fee_amount + vat_amount

    if not successful:
        message = "Charge payment failed"
    elif vat_applied:
        message = f"Charge of {fee_amount} paid with VAT of {vat_amount} (Total: {total_amount})"
    else:
        message = f"Charge of {fee_amount} paid (no VAT applicable)"

    return PaymentResult(
        fee_transaction_ref=fee_transaction.transaction_ref if successful else None,
        fee_amount=fee_amount,
        vat_amount=vat_amount,
        vat_applied=vat_applied,
        total_amount=total_amount,
        net_amount=fee_amount,
        successful=successful,
        message=message,
    )
