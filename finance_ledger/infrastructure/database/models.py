"""SQLAlchemy ORM models for accounts, loans, recurring expenses and transactions"""

from sqlalchemy import Column, String, Boolean, Date, DateTime, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Money columns: 15 digits, 2 decimals
Money = Numeric(15, 2)


class AccountRecord(Base):
    """Financial account owned by a user"""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default="BANK_ACCOUNT")
    balance = Column(Money, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="JD")
    include_in_balance = Column(Boolean, nullable=False, default=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class LoanRecord(Base):
    """Money lent to or borrowed from a person"""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    person_name = Column(String(100), nullable=False)
    loan_type = Column(String(20), nullable=False)
    principal_amount = Column(Money, nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False, default=0)
    total_amount = Column(Money, nullable=False)
    paid_amount = Column(Money, nullable=False, default=0)
    remaining_amount = Column(Money, nullable=False)
    status = Column(String(20), nullable=False, default="ACTIVE")
    loan_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    last_payment_date = Column(DateTime, nullable=True)
    is_urgent = Column(Boolean, nullable=False, default=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    description = Column(String(500), nullable=True)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class RecurringExpenseRecord(Base):
    """Periodic payment schedule"""

    __tablename__ = "recurring_expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    amount = Column(Money, nullable=False)
    frequency = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    next_due_date = Column(Date, nullable=True, index=True)
    last_paid_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    is_auto_pay = Column(Boolean, nullable=False, default=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    category_id = Column(Integer, nullable=True)
    provider = Column(String(200), nullable=True)
    reference_number = Column(String(100), nullable=True)
    reminder_days_before = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class TransactionRecord(Base):
    """Append-only ledger entry"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    description = Column(String(200), nullable=False)
    amount = Column(Money, nullable=False)
    type = Column(String(20), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, nullable=True)
    transfer_to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    transaction_date = Column(DateTime, nullable=False)
    notes = Column(String(500), nullable=True)
    reference_number = Column(String(100), nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
