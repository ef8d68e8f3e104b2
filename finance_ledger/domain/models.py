"""Domain models - pure Python dataclasses representing business entities

Entities reference each other by id only (account_id, category_id); related
rows are resolved through repositories at the start of each operation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

ZERO = Decimal("0.00")


class AccountType(str, Enum):
    WALLET = "WALLET"
    BANK_ACCOUNT = "BANK_ACCOUNT"
    SAVINGS = "SAVINGS"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTMENT = "INVESTMENT"
    CASH = "CASH"
    LOAN = "LOAN"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    CLOSED = "CLOSED"


class LoanType(str, Enum):
    LENT = "LENT"  # Money lent to someone
    BORROWED = "BORROWED"  # Money borrowed from someone


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID_OFF = "PAID_OFF"


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class ExpenseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


@dataclass
class Account:
    """Money container whose balance is only changed through the ledger"""

    owner_id: str
    name: str
    balance: Decimal = ZERO
    currency: str = "JD"
    type: AccountType = AccountType.BANK_ACCOUNT
    include_in_balance: bool = True
    status: AccountStatus = AccountStatus.ACTIVE
    id: Optional[int] = None


@dataclass
class Loan:
    """Money lent to or borrowed from a person"""

    owner_id: str
    person_name: str
    loan_type: LoanType
    principal_amount: Decimal
    loan_date: date
    interest_rate: Decimal = ZERO
    total_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    remaining_amount: Decimal = ZERO
    status: LoanStatus = LoanStatus.ACTIVE
    due_date: Optional[date] = None
    last_payment_date: Optional[datetime] = None
    is_urgent: bool = False
    account_id: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[int] = None

    def is_overdue(self, today: date) -> bool:
        return self.due_date is not None and self.due_date < today and self.status == LoanStatus.ACTIVE


@dataclass
class RecurringExpense:
    """Periodic payment such as rent or a subscription"""

    owner_id: str
    name: str
    amount: Decimal
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    next_due_date: Optional[date] = None
    last_paid_date: Optional[date] = None
    status: ExpenseStatus = ExpenseStatus.ACTIVE
    is_auto_pay: bool = False
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    provider: Optional[str] = None
    reference_number: Optional[str] = None
    reminder_days_before: int = 3
    id: Optional[int] = None

    def is_due_soon(self, today: date) -> bool:
        """Inside the reminder window before next_due_date and not yet overdue"""
        if self.next_due_date is None or self.status != ExpenseStatus.ACTIVE:
            return False
        reminder_date = self.next_due_date - timedelta(days=self.reminder_days_before)
        return reminder_date < today <= self.next_due_date


@dataclass
class Transaction:
    """Ledger entry appended as a side effect of a balance-changing operation"""

    owner_id: str
    description: str
    amount: Decimal
    type: TransactionType
    account_id: int
    transaction_date: datetime
    category_id: Optional[int] = None
    transfer_to_account_id: Optional[int] = None
    notes: Optional[str] = None
    reference_number: Optional[str] = None
    is_recurring: bool = False
    recurring_frequency: Optional[Frequency] = None
    id: Optional[int] = None


@dataclass
class InstallmentReceipt:
    """Outcome of an installment payment against a loan"""

    installment_id: str
    loan_id: int
    account_id: int
    amount: Decimal
    currency: str
    paid_at: datetime
    note: Optional[str]
    remaining_balance: Decimal
    loan_status: LoanStatus
    created_at: datetime
    status: str = "APPLIED"


@dataclass
class DueProcessingResult:
    """Outcome of a due-expense batch run"""

    examined: int = 0
    paid: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)  # due but not auto-pay
    failures: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def paid_count(self) -> int:
        return len(self.paid)


@dataclass
class LoanSummaryReport:
    total_amount_lent: Decimal
    total_amount_borrowed: Decimal
    total_repaid_for_lent: Decimal
    total_repaid_for_borrowed: Decimal
    net_loan_position: Decimal
    active_lent_loans_count: int
    active_borrowed_loans_count: int
    overdue_loans_count: int


@dataclass
class AccountTypeBalance:
    account_type: AccountType
    total_balance: Decimal
    account_count: int


@dataclass
class LoanTypeSummary:
    loan_type: LoanType
    total_amount: Decimal  # Sum of principal
    total_paid: Decimal
    remaining_amount: Decimal
    loan_count: int
    active_loan_count: int
    overdue_loan_count: int


@dataclass
class NetWorthReport:
    """Net worth = included account balances + (lent - borrowed)"""

    total_net_worth: Decimal
    total_account_balance: Decimal
    net_loan_position: Decimal
    total_amount_lent: Decimal
    total_amount_borrowed: Decimal
    account_balances_by_type: List[AccountTypeBalance]
    loan_summary_by_type: List[LoanTypeSummary]
    active_accounts_count: int
    active_loans_count: int
    overdue_loans_count: int
    currency: str
    calculated_at: datetime
