"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker
from savings_core.domain.models import FeeTransaction, LimitProfile, Slab, SplitKind, StakeholderSplit
from savings_core.domain.money import Currency
from savings_core.domain.slabs import SlabTable
from savings_core.infrastructure.database.models import Base
from savings_core.infrastructure.database.session import create_db_engine


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    """File-backed SQLite database, shared by every thread of a test"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'savings_test.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def ngn() -> Currency:
    return Currency("NGN", 2)


@pytest.fixture
def two_tier_schedule() -> SlabTable:
    """Fee of 5 up to 100, 10 above"""
    return SlabTable(
        [
            Slab(lower_bound=Decimal("101"), upper_bound=None, fee_value=Decimal("10")),
            Slab(lower_bound=Decimal("1"), upper_bound=Decimal("100"), fee_value=Decimal("5")),
        ]
    )


@pytest.fixture
def fee_transaction(ngn: Currency) -> FeeTransaction:
    return FeeTransaction(
        transaction_ref="fee_1",
        amount=Decimal("10.00"),
        transaction_date=date(2024, 3, 1),
        currency=ngn,
    )


@pytest.fixture
def stakeholder_splits() -> list[StakeholderSplit]:
    """Two percentage stakeholders plus a flat one"""
    return [
        StakeholderSplit("fund_a", SplitKind.PERCENTAGE, Decimal("40"), gl_account_ref="gl_100"),
        StakeholderSplit("fund_b", SplitKind.PERCENTAGE, Decimal("30")),
        StakeholderSplit("fund_c", SplitKind.FLAT_AMOUNT, Decimal("2.00")),
    ]


@pytest.fixture
def tier_one_profile(ngn: Currency) -> LimitProfile:
    """Tier 1 classification: 50k per deposit, 300k balance"""
    return LimitProfile(
        classification_ref=1,
        max_single_deposit_amount=Decimal("50000"),
        balance_cumulative_limit=Decimal("300000"),
        currency=ngn,
        name="Tier 1",
    )
