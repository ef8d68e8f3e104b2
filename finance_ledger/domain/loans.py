"""Loan engine - loan creation, interest, payments and the status state machine"""

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from finance_ledger.config import settings
from finance_ledger.domain.exceptions import InvalidArgumentError, NotFoundError
from finance_ledger.domain.ledger import AccountLedger
from finance_ledger.domain.models import (
    ZERO,
    InstallmentReceipt,
    Loan,
    LoanStatus,
    LoanSummaryReport,
    LoanType,
)
from finance_ledger.domain.ports import UnitOfWork
from finance_ledger.infrastructure.observability.logging import log_loan_payment
from finance_ledger.infrastructure.observability.metrics import loan_created_counter, record_loan_payment
from finance_ledger.utils.money import CENT, MoneyInput, require_positive, to_money

HUNDRED = Decimal("100")


def calculate_total_amount(principal: Decimal, interest_rate: Decimal) -> Decimal:
    """
    Total owed on a loan: simple interest over a single period.

    total = principal * (1 + rate / 100) when rate > 0, otherwise principal.

    Example:
        1000.00 at 5% -> 1050.00
        1000.00 at 0% -> 1000.00
    """
    if interest_rate > 0:
        interest = principal * interest_rate / HUNDRED
        return (principal + interest).quantize(CENT, rounding=ROUND_HALF_UP)
    return principal


def next_loan_status(current: LoanStatus, paid_amount: Decimal, remaining_amount: Decimal) -> LoanStatus:
    """
    Status after a payment. Transitions only move forward:
    ACTIVE -> PARTIALLY_PAID -> PAID_OFF.
    """
    if remaining_amount <= 0:
        return LoanStatus.PAID_OFF
    if paid_amount > 0:
        return LoanStatus.PARTIALLY_PAID
    return current


class LoanEngine:
    """Owns loan lifecycle; moves money through the AccountLedger"""

    def __init__(self, ledger: Optional[AccountLedger] = None):
        self.ledger = ledger or AccountLedger()

    def create_loan(self, uow: UnitOfWork, loan: Loan, owner_id: str) -> Loan:
        """
        Persist a new loan and move the principal.

        LENT: the principal leaves the linked account (funds checked).
        BORROWED: the principal arrives in the linked account.

        Raises:
            InvalidArgumentError: non-positive principal or negative rate
            NotFoundError: linked account missing or owned by someone else
            InsufficientFundsError: LENT principal exceeds the account balance
        """
        loan.owner_id = owner_id
        loan.principal_amount = require_positive(loan.principal_amount, "Principal amount")
        loan.interest_rate = to_money(loan.interest_rate if loan.interest_rate is not None else ZERO)
        if loan.interest_rate < 0:
            raise InvalidArgumentError("Interest rate must not be negative")
        loan.loan_type = _parse_loan_type(loan.loan_type)

        loan.total_amount = calculate_total_amount(loan.principal_amount, loan.interest_rate)
        loan.paid_amount = ZERO
        loan.remaining_amount = loan.total_amount
        loan.status = LoanStatus.ACTIVE

        if loan.account_id is not None:
            if loan.loan_type == LoanType.LENT:
                self.ledger.subtract_from_balance(
                    uow,
                    loan.account_id,
                    loan.principal_amount,
                    owner_id,
                    require_funds=True,
                    operation="loan_create",
                )
            else:
                self.ledger.add_to_balance(uow, loan.account_id, loan.principal_amount, owner_id)

        saved = uow.loans.save(loan)
        loan_created_counter.labels(loan_type=saved.loan_type.value).inc()
        return saved

    def record_payment(
        self,
        uow: UnitOfWork,
        loan_id: int,
        amount: MoneyInput,
        owner_id: str,
        paid_at: Optional[datetime] = None,
    ) -> Loan:
        """
        Apply a payment to a loan, moving money on its linked account (if any).

        Overpayment is accepted; the loan still ends PAID_OFF with a negative
        remaining amount.
        """
        amount = require_positive(amount, "Payment amount")
        loan = self._get_for_update(uow, loan_id, owner_id)

        if loan.account_id is not None:
            self._move_payment(uow, loan, loan.account_id, amount, owner_id)

        self._apply_payment(loan, amount, paid_at or datetime.now())
        saved = uow.loans.save(loan)
        self._report_payment(saved, amount)
        return saved

    def record_installment_payment(
        self,
        uow: UnitOfWork,
        loan_id: int,
        account_id: int,
        amount: MoneyInput,
        note: Optional[str],
        paid_at: Optional[datetime],
        owner_id: str,
    ) -> InstallmentReceipt:
        """Apply a payment through an explicitly chosen account"""
        amount = require_positive(amount, "Payment amount")
        loan = self._get_for_update(uow, loan_id, owner_id)
        account = self.ledger.get_account(uow, account_id, owner_id)
        paid_at = paid_at or datetime.now()

        self._move_payment(uow, loan, account.id, amount, owner_id)
        self._apply_payment(loan, amount, paid_at)
        saved = uow.loans.save(loan)
        self._report_payment(saved, amount)

        return InstallmentReceipt(
            installment_id=uuid.uuid4().hex,
            loan_id=saved.id,
            account_id=account.id,
            amount=amount,
            currency=account.currency,
            paid_at=paid_at,
            note=note,
            remaining_balance=saved.remaining_amount,
            loan_status=saved.status,
            created_at=datetime.now(),
        )

    def mark_as_urgent(self, uow: UnitOfWork, loan_id: int, owner_id: str) -> Loan:
        return self._set_urgent(uow, loan_id, owner_id, True)

    def mark_as_not_urgent(self, uow: UnitOfWork, loan_id: int, owner_id: str) -> Loan:
        return self._set_urgent(uow, loan_id, owner_id, False)

    # ========== Queries ==========

    def get_loan(self, uow: UnitOfWork, loan_id: int, owner_id: str) -> Loan:
        return self._get(uow, loan_id, owner_id)

    def list_loans(
        self,
        uow: UnitOfWork,
        owner_id: str,
        loan_type: Optional[LoanType] = None,
        status: Optional[LoanStatus] = None,
    ) -> List[Loan]:
        if loan_type is not None:
            loans = uow.loans.list_by_type(owner_id, _parse_loan_type(loan_type))
            if status is not None:
                loans = [l for l in loans if l.status == status]
            return loans
        if status is not None:
            return uow.loans.list_by_status(owner_id, status)
        return uow.loans.list_by_owner(owner_id)

    def overdue_loans(self, uow: UnitOfWork, owner_id: str, today: Optional[date] = None) -> List[Loan]:
        """Loans past their due date that have not received any payment"""
        return uow.loans.list_overdue(owner_id, today or date.today())

    def loans_due_soon(
        self,
        uow: UnitOfWork,
        owner_id: str,
        days_ahead: Optional[int] = None,
        today: Optional[date] = None,
    ) -> List[Loan]:
        today = today or date.today()
        horizon = today + timedelta(days=settings.due_soon_days if days_ahead is None else days_ahead)
        return [
            l
            for l in uow.loans.list_by_owner(owner_id)
            if l.due_date is not None and today <= l.due_date <= horizon and l.status == LoanStatus.ACTIVE
        ]

    def urgent_loans(self, uow: UnitOfWork, owner_id: str) -> List[Loan]:
        return [l for l in uow.loans.list_by_owner(owner_id) if l.is_urgent]

    def summary_report(self, uow: UnitOfWork, owner_id: str, today: Optional[date] = None) -> LoanSummaryReport:
        """Principal totals, repayments and counts per loan type"""
        lent = uow.loans.list_by_type(owner_id, LoanType.LENT)
        borrowed = uow.loans.list_by_type(owner_id, LoanType.BORROWED)

        total_lent = sum((l.principal_amount for l in lent), ZERO)
        total_borrowed = sum((l.principal_amount for l in borrowed), ZERO)

        return LoanSummaryReport(
            total_amount_lent=total_lent,
            total_amount_borrowed=total_borrowed,
            total_repaid_for_lent=sum((l.paid_amount for l in lent), ZERO),
            total_repaid_for_borrowed=sum((l.paid_amount for l in borrowed), ZERO),
            net_loan_position=total_lent - total_borrowed,
            active_lent_loans_count=sum(1 for l in lent if l.status == LoanStatus.ACTIVE),
            active_borrowed_loans_count=sum(1 for l in borrowed if l.status == LoanStatus.ACTIVE),
            overdue_loans_count=len(self.overdue_loans(uow, owner_id, today)),
        )

    # ========== Internals ==========

    def _get(self, uow: UnitOfWork, loan_id: int, owner_id: str) -> Loan:
        loan = uow.loans.get(loan_id, owner_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    def _get_for_update(self, uow: UnitOfWork, loan_id: int, owner_id: str) -> Loan:
        # save() rewrites the whole row; start from the current, locked state
        loan = uow.loans.get_for_update(loan_id, owner_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        return loan

    def _move_payment(self, uow: UnitOfWork, loan: Loan, account_id: int, amount: Decimal, owner_id: str) -> None:
        if loan.loan_type == LoanType.LENT:
            # Money lent is coming back
            self.ledger.add_to_balance(uow, account_id, amount, owner_id)
        else:
            self.ledger.subtract_from_balance(
                uow,
                account_id,
                amount,
                owner_id,
                require_funds=True,
                operation="loan_payment",
            )

    def _apply_payment(self, loan: Loan, amount: Decimal, paid_at: datetime) -> None:
        loan.paid_amount = loan.paid_amount + amount
        loan.remaining_amount = loan.total_amount - loan.paid_amount
        loan.status = next_loan_status(loan.status, loan.paid_amount, loan.remaining_amount)
        loan.last_payment_date = paid_at

    def _report_payment(self, loan: Loan, amount: Decimal) -> None:
        record_loan_payment(loan.loan_type.value, loan.status.value)
        log_loan_payment(loan.owner_id, loan.id, amount, loan.remaining_amount, loan.status.value)

    def _set_urgent(self, uow: UnitOfWork, loan_id: int, owner_id: str, urgent: bool) -> Loan:
        loan = self._get_for_update(uow, loan_id, owner_id)
        if loan.is_urgent == urgent:
            return loan
        loan.is_urgent = urgent
        return uow.loans.save(loan)


def _parse_loan_type(value) -> LoanType:
    try:
        return LoanType(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown loan type: {value!r}") from e
