"""SQLAlchemy models for the autobooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    fiscal_periods = relationship("FiscalPeriod", back_populates="company", cascade="all, delete-orphan")


class FiscalPeriod(Base):
    """Fiscal period model."""

    __tablename__ = "fiscal_periods"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "name", name="uq_company_period_name"),)

    # Relationships
    company = relationship("Company", back_populates="fiscal_periods")


class LedgerAccount(Base):
    """Chart of accounts model."""

    __tablename__ = "ledger_accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BankTransaction(Base):
    """Bank transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=True)
    credit_amount = Column(Numeric(14, 2), nullable=True)
    reference = Column(String, nullable=True)
    account_code = Column(String(20), nullable=True)
    account_name = Column(String, nullable=True)
    classified_at = Column(DateTime, nullable=True)
    classified_by = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_bank_transactions_company_code", "company_id", "account_code"),)


class ClassificationRule(Base):
    """Learned classification rule model."""

    __tablename__ = "classification_rules"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    pattern = Column(String(1000), nullable=False)
    keywords = Column(String(2000), nullable=False)
    account_code = Column(String(20), nullable=False)
    account_name = Column(String, nullable=False)
    usage_count = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    last_used = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One rule per company, account code and keyword signature
    __table_args__ = (
        UniqueConstraint("company_id", "account_code", "keywords", name="uq_rule_signature"),
    )


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_number",
    )


class JournalLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("ledger_accounts.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=True)
    credit_amount = Column(Numeric(14, 2), nullable=True)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    source_transaction_id = Column(Integer, ForeignKey("bank_transactions.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # A transaction is backed by at most one pair of lines
    __table_args__ = (
        UniqueConstraint("source_transaction_id", "line_number", name="uq_line_source_transaction"),
    )

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("LedgerAccount")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
