"""SQLAlchemy ORM models for sequences, savings products and limit settings"""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class ProductAccountSequence(Base):
    """Last allocated account number sequence per product"""

    __tablename__ = "product_account_sequence"
    __table_args__ = (UniqueConstraint("product_type", "product_id", name="uq_product_account_sequence"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_type = Column(String(20), nullable=False)
    product_id = Column(BigInteger, nullable=False)
    last_number = Column(BigInteger, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class SavingsProduct(Base):
    """Savings product with the prefix its account numbers start with"""

    __tablename__ = "savings_product"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    account_number_prefix = Column(String(2), nullable=True)


class TransactionLimitSetting(Base):
    """Named set of deposit limits that classifications are mapped to"""

    __tablename__ = "transaction_limit_setting"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    max_single_deposit_amount = Column(Numeric(19, 2), nullable=False)
    balance_cumulative = Column(Numeric(19, 2), nullable=False)
    currency_code = Column(String(3), nullable=False)
    currency_decimal_places = Column(Integer, nullable=False, default=2)
    description = Column(Text, nullable=True)

    mappings = relationship("ClassificationLimitMapping", back_populates="limit_setting")


class ClassificationLimitMapping(Base):
    """Links one client classification to its limit setting"""

    __tablename__ = "classification_limit_mapping"

    id = Column(Integer, primary_key=True)
    classification_id = Column(BigInteger, nullable=False, unique=True)
    limit_setting_id = Column(Integer, ForeignKey("transaction_limit_setting.id"), nullable=True)

    limit_setting = relationship("TransactionLimitSetting", back_populates="mappings")
