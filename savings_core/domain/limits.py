"""Classification-scoped deposit limit evaluation"""

from typing import Callable, List, Optional

from savings_core.domain.exceptions import CurrencyMismatchError
from savings_core.domain.models import DebitBlockAction, LimitBreach, LimitProfile
from savings_core.domain.money import Money

ProfileLookup = Callable[[int], Optional[LimitProfile]]


class TransactionLimitEvaluator:
    """
    Checks deposits against the limit profile mapped to a client's classification.

    Contract:
    - a client without a classification, or a classification with no mapped
      profile, has no enforced limit: exceeds_limits returns False
    - a deposit within both limits returns False
    - it returns True only when at least one limit is breached

    The evaluator only reads profiles through the lookup; it never changes
    account state.
    """

    def __init__(self, profile_lookup: ProfileLookup):
        self.profile_lookup = profile_lookup

    def _profile_for(self, classification_ref: int | None) -> LimitProfile | None:
        if classification_ref is None:
            return None
        return self.profile_lookup(classification_ref)

    @staticmethod
    def _limit(profile: LimitProfile, value, money: Money) -> Money:
        if profile.currency.code != money.currency.code:
            raise CurrencyMismatchError(expected=profile.currency.code, actual=money.currency.code)
        return Money.of(money.currency, value)

    def breaches(
        self,
        classification_ref: int | None,
        current_balance: Money,
        transaction_amount: Money,
    ) -> List[LimitBreach]:
        """Every limit the deposit would break, in evaluation order"""
        profile = self._profile_for(classification_ref)
        if profile is None:
            return []

        max_single = self._limit(profile, profile.max_single_deposit_amount, transaction_amount)
        cumulative = self._limit(profile, profile.balance_cumulative_limit, current_balance)

        breached: List[LimitBreach] = []
        if transaction_amount.is_greater_than(max_single):
            breached.append(LimitBreach.MAX_SINGLE_DEPOSIT)
        if current_balance.plus(transaction_amount).is_greater_than(cumulative):
            breached.append(LimitBreach.BALANCE_CUMULATIVE)
        return breached

    def exceeds_limits(
        self,
        classification_ref: int | None,
        current_balance: Money,
        transaction_amount: Money,
    ) -> bool:
        return bool(self.breaches(classification_ref, current_balance, transaction_amount))

    def reassess_debit_block(
        self,
        classification_ref: int | None,
        current_balance: Money,
        debit_blocked: bool,
    ) -> DebitBlockAction | None:
        """
        Re-check an account's debit block after its client changes classification.

        Blocked accounts at or under the new cumulative limit are unblocked;
        unblocked accounts over it are blocked. None means leave as is.
        """
        profile = self._profile_for(classification_ref)
        if profile is None:
            return None

        cumulative = self._limit(profile, profile.balance_cumulative_limit, current_balance)
        over_limit = current_balance.is_greater_than(cumulative)
        if debit_blocked and not over_limit:
            return DebitBlockAction.UNBLOCK
        if not debit_blocked and over_limit:
            return DebitBlockAction.BLOCK
        return None
