"""SQLAlchemy models for bankimport database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class LedgerAccount(Base):
    """Chart-of-accounts entry model."""

    __tablename__ = "ledger_accounts"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("tenant_id", "code", name="uq_tenant_account_code"),)

    transactions = relationship("Transaction", back_populates="account")


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class FundSource(Base):
    """Fund source model."""

    __tablename__ = "fund_sources"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class ImportBatch(Base):
    """Import batch model."""

    __tablename__ = "import_batches"

    id = Column(String, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    filename = Column(String, nullable=True)
    bank_type = Column(String, nullable=True)
    total_count = Column(Integer, default=0, nullable=False)
    success_count = Column(Integer, default=0, nullable=False)
    duplicate_count = Column(Integer, default=0, nullable=False)
    failed_count = Column(Integer, default=0, nullable=False)
    transaction_ids = Column(JSON, default=list, nullable=False)
    errors = Column(JSON, default=list, nullable=False)
    status = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Committed transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    batch_id = Column(String, ForeignKey("import_batches.id"), nullable=True, index=True)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    account_id = Column(Integer, ForeignKey("ledger_accounts.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    fund_source_id = Column(Integer, ForeignKey("fund_sources.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    account = relationship("LedgerAccount", back_populates="transactions")


class LearnedClassification(Base):
    """Learned description to account mapping model."""

    __tablename__ = "learned_classifications"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False)
    description = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("ledger_accounts.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    fund_source_id = Column(Integer, ForeignKey("fund_sources.id"), nullable=True)
    confidence = Column(Float, default=1.0, nullable=False)
    usage_count = Column(Integer, default=1, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Upserts target this constraint
    __table_args__ = (
        UniqueConstraint("tenant_id", "description", name="uq_tenant_learned_description"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
