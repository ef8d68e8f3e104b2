"""Prometheus metrics for balance mutations, loan payments and recurring expense processing"""

from prometheus_client import Counter, Histogram

# Ledger metrics
balance_mutation_counter = Counter(
    "ledger_balance_mutations_total",
    "Account balance mutations applied",
    ["direction"],  # credit | debit
)

insufficient_funds_counter = Counter(
    "ledger_insufficient_funds_total",
    "Debits rejected for insufficient balance",
    ["operation"],
)

# Loan metrics
loan_created_counter = Counter(
    "ledger_loans_created_total",
    "Loans created",
    ["loan_type"],  # LENT | BORROWED
)

loan_payment_counter = Counter(
    "ledger_loan_payments_total",
    "Payments recorded against loans",
    ["loan_type", "status"],
)

# Recurring expense metrics
recurring_payment_counter = Counter(
    "ledger_recurring_payments_total",
    "Recurring expense payments",
    ["outcome"],  # paid | failed
)

due_batch_histogram = Histogram(
    "ledger_due_batch_seconds",
    "Duration of due recurring expense batch runs",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_balance_mutation(direction: str) -> None:
    balance_mutation_counter.labels(direction=direction).inc()


def record_insufficient_funds(operation: str) -> None:
    insufficient_funds_counter.labels(operation=operation).inc()


def record_loan_payment(loan_type: str, status: str) -> None:
    """Record loan payment outcome for monitoring payoff progress"""
    loan_payment_counter.labels(loan_type=loan_type, status=status).inc()
