"""Pydantic schemas for partial-update requests on slabs and splits"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from savings_core.domain.models import SplitKind


class ChangeRequest(BaseModel):
    """Base for partial updates: only fields the caller sent are applied"""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def requested_changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class SlabUpdate(ChangeRequest):
    """Partial update of a fee slab"""

    lower_bound: Optional[Decimal] = Field(None, alias="fromAmount")
    upper_bound: Optional[Decimal] = Field(None, alias="toAmount", description="null makes the slab unbounded")
    fee_value: Optional[Decimal] = Field(None, alias="value")

    @field_validator("lower_bound", "fee_value")
    @classmethod
    def not_null(cls, value: Optional[Decimal]) -> Decimal:
        if value is None:
            raise ValueError("must not be null")
        return value


class SplitUpdate(ChangeRequest):
    """Partial update of a stakeholder split"""

    stakeholder_ref: Optional[str] = Field(None, alias="fundId", min_length=1)
    kind: Optional[SplitKind] = Field(None, alias="splitType")
    value: Optional[Decimal] = Field(None, alias="splitValue", ge=0)
    active: Optional[bool] = None
    gl_account_ref: Optional[str] = Field(None, alias="glAccountId")

    @field_validator("stakeholder_ref", "kind", "value", "active")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value
