"""Account number generation - sequence allocation plus synthesis"""

import time

from sqlalchemy.orm import sessionmaker

from savings_core.config import settings
from savings_core.domain.account_numbers import AccountNumberSynthesizer
from savings_core.domain.exceptions import AllocationFailureError
from savings_core.infrastructure.database.repositories import (
    SAVINGS_PRODUCT_TYPE,
    ProductSequenceRepository,
    SavingsProductRepository,
)
from savings_core.infrastructure.database.session import get_session_factory
from savings_core.infrastructure.observability.logging import log_account_number_generated, logger
from savings_core.infrastructure.observability.metrics import (
    account_number_counter,
    sequence_allocation_failures_counter,
    sequence_allocation_latency_histogram,
)


class AccountNumberService:
    """Allocates per-product sequences and renders them into account numbers"""

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        institution_code: str | None = None,
        product_type: str = SAVINGS_PRODUCT_TYPE,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.institution_code = institution_code if institution_code is not None else settings.institution_code
        self.product_type = product_type

    def next_sequence(self, product_id: int) -> int:
        """
        Allocate the product's next sequence in its own committed transaction.

        An allocated value is never handed out again, even when the account
        it was meant for fails to open.
        """
        start_time = time.time()
        try:
            with self.session_factory() as db, db.begin():
                return ProductSequenceRepository(db).next_for_product(self.product_type, product_id)
        except AllocationFailureError:
            sequence_allocation_failures_counter.inc()
            logger.error(
                "Sequence allocation failed",
                extra={"step": "sequence_allocation", "product_type": self.product_type, "product_id": product_id},
            )
            raise
        finally:
            sequence_allocation_latency_histogram.observe(time.time() - start_time)

    def generate(self, product_id: int) -> str:
        """Next account number for a product"""
        sequence = self.next_sequence(product_id)

        with self.session_factory() as db:
            synthesizer = AccountNumberSynthesizer(
                self.institution_code,
                SavingsProductRepository(db).get_account_number_prefix,
            )
            account_number = synthesizer.synthesize(product_id, sequence)

        account_number_counter.labels(product_type=self.product_type).inc()
        log_account_number_generated(self.product_type, product_id, sequence, account_number)
        return account_number
