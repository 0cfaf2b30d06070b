"""Fee slab schedule - tier lookup and overlap/gap validation"""

from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Tuple, Any

from savings_core.domain.exceptions import NoMatchingSlabError, ParameterError, ScheduleValidationError
from savings_core.domain.models import Slab
from savings_core.domain.money import to_decimal
from savings_core.domain.schemas import SlabUpdate

# Smallest unit between one slab's upper bound and the next slab's lower bound
SLAB_STEP = Decimal("1")


class SlabConflict(str, Enum):
    OVERLAP_DETECTED = "chart.slabs.range.overlapping"
    GAP_DETECTED = "chart.slabs.range.has.gap"
    INVERTED_RANGE = "from.period.is.greater.than.to.period"


def _conflict(conflict: SlabConflict, parameter: str, message: str, value: Any) -> ParameterError:
    return ParameterError(parameter=parameter, code=conflict.value, message=message, value=value)


def validate(candidate: Slab, existing_slabs: Iterable[Slab]) -> List[ParameterError]:
    """
    Check a new or edited slab against the rest of its schedule.

    A slab with exactly the same bounds as an existing one is a resubmission of
    that tier and is not reported.
    """
    errors: List[ParameterError] = []
    if candidate.is_inverted():
        errors.append(
            _conflict(
                SlabConflict.INVERTED_RANGE,
                "fromAmount",
                f"fromAmount {candidate.lower_bound} is greater than toAmount {candidate.upper_bound}",
                candidate.lower_bound,
            )
        )

    for other in existing_slabs:
        if other is candidate:
            continue
        if candidate.overlaps(other) and not candidate.is_period_same(other):
            errors.append(
                _conflict(
                    SlabConflict.OVERLAP_DETECTED,
                    "chartSlabs",
                    f"Slab {_describe(candidate)} overlaps slab {_describe(other)}",
                    candidate.lower_bound,
                )
            )
    return errors


def has_gap(prev: Slab, next_slab: Slab, step: Decimal = SLAB_STEP) -> bool:
    """True when next_slab does not start exactly one step after prev ends"""
    if prev.is_period_same(next_slab):
        return False
    if prev.upper_bound is None:
        return True
    return next_slab.lower_bound != prev.upper_bound + step


def _describe(slab: Slab) -> str:
    upper = "∞" if slab.upper_bound is None else slab.upper_bound
    return f"[{slab.lower_bound}, {upper}]"


class SlabTable:
    """Ordered fee tiers of one charge"""

    def __init__(self, slabs: Iterable[Slab], step: Decimal = SLAB_STEP):
        # Stable sort keeps duplicates in authoring order; the first one wins lookups
        self.slabs: List[Slab] = sorted(slabs, key=lambda s: s.lower_bound)
        self.step = step

    def resolve(self, amount) -> Decimal:
        """Fee value of the first slab whose range contains amount"""
        amount = to_decimal(amount)
        for slab in self.slabs:
            if slab.contains(amount):
                return slab.fee_value
        raise NoMatchingSlabError(amount)

    def validate_schedule(self) -> List[ParameterError]:
        """Collect every inverted range, overlap and gap in the schedule"""
        errors: List[ParameterError] = []
        for index, slab in enumerate(self.slabs):
            errors.extend(validate(slab, self.slabs[index + 1:]))
            if slab.is_inverted():
                continue
            if index + 1 < len(self.slabs):
                next_slab = self.slabs[index + 1]
                if has_gap(slab, next_slab, self.step) and not slab.overlaps(next_slab):
                    errors.append(
                        _conflict(
                            SlabConflict.GAP_DETECTED,
                            "chartSlabs",
                            f"Gap between slab {_describe(slab)} and slab {_describe(next_slab)}",
                            next_slab.lower_bound,
                        )
                    )
        return errors

    def ensure_valid(self) -> None:
        errors = self.validate_schedule()
        if errors:
            raise ScheduleValidationError(errors)

    def update_slab(self, index: int, request: SlabUpdate) -> Tuple[Dict[str, Any], List[ParameterError]]:
        """
        Validate a partial update to one slab and apply it when clean.

        Returns the fields the update would change and any conflicts the edited
        slab would have with the rest of the schedule. The schedule is left
        untouched when there are conflicts.
        """
        slab = self.slabs[index]
        edited = replace(slab)
        changes = edited.update(request.requested_changes())
        errors = validate(edited, [s for s in self.slabs if s is not slab])
        if changes and not errors:
            slab.update(changes)
            self.slabs.sort(key=lambda s: s.lower_bound)
        return changes, errors
