"""SQLAlchemy models for ledgerkit database.

Amounts are stored as integer minor units at the book scale.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Subject(Base):
    """Chart-of-accounts subject model."""

    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    direction = Column(String, nullable=True)  # "debit" / "credit"
    parent_id = Column(Integer, ForeignKey("subjects.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    parent = relationship("Subject", remote_side=[id], backref="children")


class AuxiliaryItem(Base):
    """Auxiliary dimension item (customer, project, ...)."""

    __tablename__ = "auxiliary_items"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)


class Voucher(Base):
    """Voucher header model."""

    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="draft")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    lines = relationship(
        "VoucherLine",
        back_populates="voucher",
        cascade="all, delete-orphan",
        order_by="VoucherLine.position",
    )


class VoucherLine(Base):
    """Voucher line model."""

    __tablename__ = "voucher_lines"

    id = Column(Integer, primary_key=True)
    voucher_id = Column(Integer, ForeignKey("vouchers.id"), nullable=False)
    position = Column(Integer, nullable=False)
    subject_code = Column(String, nullable=False)
    auxiliary_key = Column(String, nullable=True)
    debit = Column(BigInteger, nullable=False, default=0)
    credit = Column(BigInteger, nullable=False, default=0)
    summary = Column(String, nullable=False, default="")

    __table_args__ = (UniqueConstraint("voucher_id", "position", name="uq_voucher_line_position"),)

    voucher = relationship("Voucher", back_populates="lines")


class Category(Base):
    """Cash-journal income/expense category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)  # "income" / "expense"

    journal_entries = relationship("JournalEntry", back_populates="category")


class FundAccount(Base):
    """Cash or bank account model."""

    __tablename__ = "fund_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    related_subject_code = Column(String, nullable=False)
    related_auxiliary_key = Column(String, nullable=True)
    opening_date = Column(Date, nullable=False)
    opening_balance = Column(BigInteger, nullable=False, default=0)

    journal_entries = relationship(
        "JournalEntry", back_populates="fund_account", cascade="all, delete-orphan"
    )


class JournalEntry(Base):
    """Cash-journal entry model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    fund_account_id = Column(Integer, ForeignKey("fund_accounts.id"), nullable=False)
    income = Column(BigInteger, nullable=False, default=0)
    expense = Column(BigInteger, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    linked_voucher_code = Column(String, nullable=True)
    summary = Column(String, nullable=False, default="")
    is_internal_transfer = Column(Boolean, default=False, nullable=False)

    fund_account = relationship("FundAccount", back_populates="journal_entries")
    category = relationship("Category", back_populates="journal_entries")


class InitialBalance(Base):
    """Setup balance for a subject or subject + auxiliary item."""

    __tablename__ = "initial_balances"

    id = Column(Integer, primary_key=True)
    subject_code = Column(String, nullable=False)
    auxiliary_key = Column(String, nullable=True)
    opening_balance = Column(BigInteger, nullable=False, default=0)
    year_to_date_debit = Column(BigInteger, nullable=False, default=0)
    year_to_date_credit = Column(BigInteger, nullable=False, default=0)
    effective_date = Column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint("subject_code", "auxiliary_key", name="uq_initial_balance_subject_aux"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
