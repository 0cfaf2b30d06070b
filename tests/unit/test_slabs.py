"""Unit tests for fee slab lookup and schedule validation"""

import pytest
from decimal import Decimal
from pydantic import ValidationError as PydanticValidationError
from savings_core.domain.exceptions import NoMatchingSlabError, ScheduleValidationError
from savings_core.domain.models import Slab
from savings_core.domain.schemas import SlabUpdate
from savings_core.domain.slabs import SlabConflict, SlabTable, has_gap, validate


def slab(lower, upper, fee) -> Slab:
    return Slab(
        lower_bound=Decimal(str(lower)),
        upper_bound=None if upper is None else Decimal(str(upper)),
        fee_value=Decimal(str(fee)),
    )


def test_resolve_inclusive_bounds(two_tier_schedule: SlabTable):
    """Test both slab bounds are inclusive"""
    assert two_tier_schedule.resolve(50) == Decimal("5")
    assert two_tier_schedule.resolve(100) == Decimal("5")
    assert two_tier_schedule.resolve(101) == Decimal("10")
    assert two_tier_schedule.resolve(Decimal("1000000")) == Decimal("10")


def test_resolve_zero_based_schedule():
    """Test schedule starting at zero: fee 5 up to 100, 10 above"""
    table = SlabTable([slab(0, 100, 5), slab(101, None, 10)])

    assert table.validate_schedule() == []
    assert table.resolve(0) == Decimal("5")
    assert table.resolve(50) == Decimal("5")
    assert table.resolve(100) == Decimal("5")
    assert table.resolve(101) == Decimal("10")


def test_single_unbounded_slab_matches_everything():
    table = SlabTable([slab(0, None, 25)])

    assert table.validate_schedule() == []
    assert table.resolve(0) == Decimal("25")
    assert table.resolve(Decimal("999999999999.99")) == Decimal("25")


def test_resolve_amount_below_schedule(two_tier_schedule: SlabTable):
    """Test amounts outside every slab raise instead of defaulting"""
    with pytest.raises(NoMatchingSlabError) as exc_info:
        two_tier_schedule.resolve(0)

    assert exc_info.value.amount == Decimal("0")


def test_resolve_amount_between_slabs(two_tier_schedule: SlabTable):
    """Test fractional amount falling between integer slabs"""
    with pytest.raises(NoMatchingSlabError):
        two_tier_schedule.resolve("100.50")


def test_resolve_first_slab_wins_on_duplicates():
    """Test duplicated bounds resolve to the slab authored first"""
    table = SlabTable([slab(1, 100, 5), slab(1, 100, 7)])
    assert table.resolve(10) == Decimal("5")


def test_identical_bounds_are_not_a_conflict():
    """Test resubmitting a slab with the same bounds"""
    assert validate(slab(1, 100, 5), [slab(1, 100, 7)]) == []


def test_overlap_detected():
    errors = validate(slab(50, 200, 8), [slab(1, 100, 5)])

    assert len(errors) == 1
    assert errors[0].code == SlabConflict.OVERLAP_DETECTED.value
    assert errors[0].value == Decimal("50")


def test_overlap_with_unbounded_slab():
    """Test an unbounded slab overlaps everything above its lower bound"""
    errors = validate(slab(500, 600, 8), [slab(101, None, 10)])
    assert [e.code for e in errors] == [SlabConflict.OVERLAP_DETECTED.value]


def test_adjacent_slabs_do_not_overlap():
    assert validate(slab(101, 200, 8), [slab(1, 100, 5)]) == []


def test_inverted_range():
    errors = validate(slab(200, 100, 5), [])

    assert [e.code for e in errors] == [SlabConflict.INVERTED_RANGE.value]
    assert errors[0].parameter == "fromAmount"


def test_has_gap():
    """Test gap detection uses a one-unit step"""
    assert has_gap(slab(1, 100, 5), slab(101, 200, 8)) is False
    assert has_gap(slab(1, 100, 5), slab(150, 200, 8)) is True
    assert has_gap(slab(1, 100, 5), slab(1, 100, 6)) is False
    assert has_gap(slab(1, None, 5), slab(150, 200, 8)) is True


def test_has_gap_custom_step():
    assert has_gap(slab("0.01", "100.00", 5), slab("100.01", None, 8), step=Decimal("0.01")) is False


def test_validate_schedule_clean(two_tier_schedule: SlabTable):
    assert two_tier_schedule.validate_schedule() == []
    two_tier_schedule.ensure_valid()


def test_validate_schedule_reports_gap():
    table = SlabTable([slab(1, 100, 5), slab(150, None, 10)])

    errors = table.validate_schedule()
    assert [e.code for e in errors] == [SlabConflict.GAP_DETECTED.value]
    with pytest.raises(ScheduleValidationError):
        table.ensure_valid()


def test_validate_schedule_reports_overlap_once():
    """Test an overlap is not also reported as a gap"""
    table = SlabTable([slab(1, 100, 5), slab(90, None, 10)])
    assert [e.code for e in table.validate_schedule()] == [SlabConflict.OVERLAP_DETECTED.value]


def test_update_slab_conflict_leaves_schedule_untouched(two_tier_schedule: SlabTable):
    """Test a conflicting update is reported but not applied"""
    changes, errors = two_tier_schedule.update_slab(0, SlabUpdate(toAmount=Decimal("150")))

    assert changes == {"upper_bound": Decimal("150")}
    assert [e.code for e in errors] == [SlabConflict.OVERLAP_DETECTED.value]
    assert two_tier_schedule.slabs[0].upper_bound == Decimal("100")
    assert two_tier_schedule.resolve(120) == Decimal("10")


def test_update_slab_applies_clean_change(two_tier_schedule: SlabTable):
    """Test partial update applies only sent fields"""
    changes, errors = two_tier_schedule.update_slab(1, SlabUpdate(value=Decimal("12")))

    assert changes == {"fee_value": Decimal("12")}
    assert errors == []
    assert two_tier_schedule.slabs[1].fee_value == Decimal("12")
    assert two_tier_schedule.slabs[1].lower_bound == Decimal("101")
    assert two_tier_schedule.resolve(500) == Decimal("12")


def test_update_slab_no_op(two_tier_schedule: SlabTable):
    """Test resending the current values changes nothing"""
    changes, errors = two_tier_schedule.update_slab(0, SlabUpdate(fromAmount=Decimal("1"), value=Decimal("5")))

    assert changes == {}
    assert errors == []


def test_update_slab_can_unbound_upper_limit():
    table = SlabTable([slab(1, 100, 5)])
    changes, errors = table.update_slab(0, SlabUpdate(toAmount=None))

    assert changes == {"upper_bound": None}
    assert errors == []
    assert table.resolve(10_000) == Decimal("5")


def test_slab_update_rejects_null_lower_bound():
    with pytest.raises(PydanticValidationError):
        SlabUpdate(fromAmount=None)


def test_slab_update_rejects_unknown_fields():
    with pytest.raises(PydanticValidationError):
        SlabUpdate(minAmount=Decimal("1"))
