"""Pydantic schemas for API request/response validation

Amounts and enum-like fields are accepted loosely here; the domain layer
decides whether they are valid so that rule violations surface as 400s.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from finance_ledger.domain.models import (
    AccountType,
    ExpenseStatus,
    Frequency,
    LoanStatus,
    LoanType,
    TransactionType,
)


class LoanCreateRequest(BaseModel):
    """Request body for POST /v1/loans"""

    person_name: str = Field(..., min_length=1, max_length=100)
    loan_type: str = Field(..., description="LENT or BORROWED")
    principal_amount: Decimal
    interest_rate: Decimal = Decimal("0")
    loan_date: Optional[date] = None
    due_date: Optional[date] = None
    account_id: Optional[int] = None
    is_urgent: bool = False
    description: Optional[str] = None
    notes: Optional[str] = None


class LoanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_name: str
    loan_type: LoanType
    principal_amount: Decimal
    interest_rate: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    status: LoanStatus
    loan_date: date
    due_date: Optional[date] = None
    last_payment_date: Optional[datetime] = None
    is_urgent: bool
    account_id: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class PaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/payments"""

    amount: Decimal
    paid_at: Optional[datetime] = None


class InstallmentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/installments"""

    account_id: int
    amount: Decimal
    note: Optional[str] = Field(None, max_length=500)
    paid_at: Optional[datetime] = None


class InstallmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    installment_id: str
    loan_id: int
    account_id: int
    amount: Decimal
    currency: str
    paid_at: datetime
    note: Optional[str] = None
    remaining_balance: Decimal
    loan_status: LoanStatus
    created_at: datetime
    status: str


class LoanSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_amount_lent: Decimal
    total_amount_borrowed: Decimal
    total_repaid_for_lent: Decimal
    total_repaid_for_borrowed: Decimal
    net_loan_position: Decimal
    active_lent_loans_count: int
    active_borrowed_loans_count: int
    overdue_loans_count: int


class RecurringExpenseCreateRequest(BaseModel):
    """Request body for POST /v1/recurring-expenses"""

    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal
    frequency: str = Field(..., description="DAILY, WEEKLY, MONTHLY, QUARTERLY or YEARLY")
    start_date: date
    end_date: Optional[date] = None
    next_due_date: Optional[date] = None
    is_auto_pay: bool = False
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    provider: Optional[str] = None
    reference_number: Optional[str] = None
    reminder_days_before: int = 3


class RecurringExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    amount: Decimal
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    next_due_date: Optional[date] = None
    last_paid_date: Optional[date] = None
    status: ExpenseStatus
    is_auto_pay: bool
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    provider: Optional[str] = None
    reference_number: Optional[str] = None


class ProcessingFailure(BaseModel):
    expense_id: int
    reason: str


class DueProcessingResponse(BaseModel):
    """Response for POST /v1/recurring-expenses/process-due"""

    examined: int
    paid_count: int
    paid: List[int]
    skipped: List[int]
    failures: List[ProcessingFailure]


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal
    type: str = Field(..., description="INCOME, EXPENSE or TRANSFER")
    account_id: int
    category_id: Optional[int] = None
    transfer_to_account_id: Optional[int] = None
    transaction_date: Optional[datetime] = None
    notes: Optional[str] = None
    reference_number: Optional[str] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: Decimal
    type: TransactionType
    account_id: int
    category_id: Optional[int] = None
    transfer_to_account_id: Optional[int] = None
    transaction_date: datetime
    is_recurring: bool


class AccountTypeBalanceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_type: AccountType
    total_balance: Decimal
    account_count: int


class LoanTypeSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loan_type: LoanType
    total_amount: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    loan_count: int
    active_loan_count: int
    overdue_loan_count: int


class NetWorthResponse(BaseModel):
    """Response for GET /v1/net-worth"""

    model_config = ConfigDict(from_attributes=True)

    total_net_worth: Decimal
    total_account_balance: Decimal
    net_loan_position: Decimal
    total_amount_lent: Decimal
    total_amount_borrowed: Decimal
    account_balances_by_type: List[AccountTypeBalanceSchema]
    loan_summary_by_type: List[LoanTypeSummarySchema]
    active_accounts_count: int
    active_loans_count: int
    overdue_loans_count: int
    currency: str
    calculated_at: datetime
