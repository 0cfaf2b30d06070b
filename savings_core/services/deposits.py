"""Deposit limit checks against the client's classification profile"""

from typing import List

from sqlalchemy.orm import Session

from savings_core.domain.limits import TransactionLimitEvaluator
from savings_core.domain.models import LimitBreach
from savings_core.domain.money import Money
from savings_core.infrastructure.database.repositories import LimitProfileRepository
from savings_core.infrastructure.observability.logging import log_limit_breach
from savings_core.infrastructure.observability.metrics import limit_breach_counter


def check_deposit_limits(
    db: Session,
    classification_ref: int | None,
    current_balance: Money,
    transaction_amount: Money,
) -> List[LimitBreach]:
    """
    Evaluate a deposit before it is posted.

    Returns the breached limits (empty when the deposit is allowed or the
    classification has no limit profile). Nothing is written.
    """
    evaluator = TransactionLimitEvaluator(LimitProfileRepository(db).find_by_classification)
    breaches = evaluator.breaches(classification_ref, current_balance, transaction_amount)

    if breaches:
        for breach in breaches:
            limit_breach_counter.labels(limit=breach.name).inc()
        log_limit_breach(classification_ref, [b.value for b in breaches], transaction_amount.amount)
    return breaches
