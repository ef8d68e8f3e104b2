"""Net worth aggregation - read-only view over accounts and loans"""

from datetime import date, datetime
from typing import Dict, List, Optional

from finance_ledger.config import settings
from finance_ledger.domain.models import (
    ZERO,
    Account,
    AccountStatus,
    AccountType,
    AccountTypeBalance,
    Loan,
    LoanStatus,
    LoanType,
    LoanTypeSummary,
    NetWorthReport,
)
from finance_ledger.domain.ports import UnitOfWork


def build_account_balances_by_type(accounts: List[Account]) -> List[AccountTypeBalance]:
    grouped: Dict[AccountType, List[Account]] = {}
    for account in accounts:
        grouped.setdefault(account.type, []).append(account)

    return [
        AccountTypeBalance(
            account_type=account_type,
            total_balance=sum((a.balance for a in group), ZERO),
            account_count=len(group),
        )
        for account_type, group in grouped.items()
    ]


def build_loan_summary_by_type(loans: List[Loan], today: date) -> List[LoanTypeSummary]:
    grouped: Dict[LoanType, List[Loan]] = {}
    for loan in loans:
        grouped.setdefault(loan.loan_type, []).append(loan)

    return [
        LoanTypeSummary(
            loan_type=loan_type,
            total_amount=sum((l.principal_amount for l in group), ZERO),
            total_paid=sum((l.paid_amount for l in group), ZERO),
            remaining_amount=sum((l.remaining_amount for l in group), ZERO),
            loan_count=len(group),
            active_loan_count=sum(1 for l in group if l.status == LoanStatus.ACTIVE),
            overdue_loan_count=sum(1 for l in group if l.is_overdue(today)),
        )
        for loan_type, group in grouped.items()
    ]


def aggregate_net_worth(
    accounts: List[Account],
    loans: List[Loan],
    today: date,
    currency: str,
) -> NetWorthReport:
    """
    Compute net worth from already-fetched accounts and loans.

    Net Worth = Total Account Balance + Net Loan Position
    Net Loan Position = principal lent - principal borrowed (any status)

    Only ACTIVE accounts flagged include_in_balance contribute.
    """
    included = [
        a for a in accounts if a.include_in_balance and a.status == AccountStatus.ACTIVE
    ]
    total_account_balance = sum((a.balance for a in included), ZERO)

    total_lent = sum((l.principal_amount for l in loans if l.loan_type == LoanType.LENT), ZERO)
    total_borrowed = sum((l.principal_amount for l in loans if l.loan_type == LoanType.BORROWED), ZERO)
    net_loan_position = total_lent - total_borrowed

    return NetWorthReport(
        total_net_worth=total_account_balance + net_loan_position,
        total_account_balance=total_account_balance,
        net_loan_position=net_loan_position,
        total_amount_lent=total_lent,
        total_amount_borrowed=total_borrowed,
        account_balances_by_type=build_account_balances_by_type(included),
        loan_summary_by_type=build_loan_summary_by_type(loans, today),
        active_accounts_count=len(included),
        active_loans_count=sum(1 for l in loans if l.status == LoanStatus.ACTIVE),
        overdue_loans_count=sum(1 for l in loans if l.is_overdue(today)),
        currency=currency,
        calculated_at=datetime.now(),
    )


class NetWorthAggregator:
    """Reads accounts and loans in two bulk fetches; never writes"""

    def __init__(self, currency: Optional[str] = None):
        self.currency = currency or settings.default_currency

    def calculate(self, uow: UnitOfWork, owner_id: str, today: Optional[date] = None) -> NetWorthReport:
        accounts = uow.accounts.list_included_active(owner_id)
        loans = uow.loans.list_by_owner(owner_id)
        return aggregate_net_worth(accounts, loans, today or date.today(), self.currency)
