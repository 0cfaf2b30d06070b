"""Data access layer for account sequences, product prefixes and limit profiles"""

from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from savings_core.domain.exceptions import AllocationFailureError, LimitProfileNotFoundError
from savings_core.domain.models import LimitProfile
from savings_core.domain.money import Currency
from savings_core.infrastructure.database.models import (
    ClassificationLimitMapping,
    ProductAccountSequence,
    SavingsProduct,
)

SAVINGS_PRODUCT_TYPE = "SAVINGS"

# Dialects offering INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProductSequenceRepository:
    """Repository for per-product account number sequences"""

    def __init__(self, db: Session):
        self.db = db

    def next_for_product(self, product_type: str, product_id: int) -> int:
        """
        Atomically increment and return the product's sequence, starting at 1.

        A single upsert statement does the read and the write, so concurrent
        callers for the same product never see the same value. Runs inside the
        caller's transaction; committing it is the caller's job.
        """
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise AllocationFailureError(f"Database dialect {dialect} has no atomic upsert for sequence allocation")

        table = ProductAccountSequence.__table__
        stmt = (
            insert(table)
            .values(product_type=product_type, product_id=product_id, last_number=1)
            .on_conflict_do_update(
                index_elements=[table.c.product_type, table.c.product_id],
                set_={"last_number": table.c.last_number + 1, "updated_at": func.now()},
            )
            .returning(table.c.last_number)
        )
        next_number = self.db.execute(stmt).scalar_one_or_none()
        if next_number is None:
            raise AllocationFailureError(
                f"Failed to allocate next account number sequence for {product_type} product {product_id}"
            )
        return next_number

    def current_for_product(self, product_type: str, product_id: int) -> Optional[int]:
        """Last allocated value, None when the product never allocated one"""
        return (
            self.db.query(ProductAccountSequence.last_number)
            .filter(
                ProductAccountSequence.product_type == product_type,
                ProductAccountSequence.product_id == product_id,
            )
            .scalar()
        )


class SavingsProductRepository:
    """Repository for savings product numbering attributes"""

    def __init__(self, db: Session):
        self.db = db

    def get_account_number_prefix(self, product_id: int) -> Optional[str]:
        product = self.db.get(SavingsProduct, product_id)
        if product is None:
            return None
        return product.account_number_prefix


class LimitProfileRepository:
    """Repository resolving classification limit mappings into profiles"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_classification(self, classification_ref: int) -> Optional[LimitProfile]:
        """
        Profile mapped to a classification.

        None when the classification has no mapping or its mapping carries no
        limit setting. A mapping pointing at a setting that does not exist is a
        configuration error.
        """
        mapping = (
            self.db.query(ClassificationLimitMapping)
            .filter(ClassificationLimitMapping.classification_id == classification_ref)
            .first()
        )
        if mapping is None or mapping.limit_setting_id is None:
            return None

        setting = mapping.limit_setting
        if setting is None:
            raise LimitProfileNotFoundError(classification_ref, mapping.limit_setting_id)

        return LimitProfile(
            classification_ref=classification_ref,
            max_single_deposit_amount=setting.max_single_deposit_amount,
            balance_cumulative_limit=setting.balance_cumulative,
            currency=Currency(setting.currency_code, setting.currency_decimal_places),
            name=setting.name,
        )
