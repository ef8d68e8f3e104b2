"""Domain-specific exceptions"""

from decimal import Decimal


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Entity does not exist or belongs to another owner"""

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidArgumentError(DomainException):
    """Operation arguments violate a domain rule"""

    pass


class ExpenseNotPayableError(InvalidArgumentError):
    """Recurring expense status does not allow the requested transition"""

    pass


class InsufficientFundsError(DomainException):
    """Account balance cannot cover the requested debit"""

    def __init__(self, account_id: int, available: Decimal, required: Decimal):
        super().__init__(
            f"Insufficient balance in account {account_id}. Available: {available}, Required: {required}"
        )
        self.account_id = account_id
        self.available = available
        self.required = required
