"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDayRuleError(DomainException):
    """Closing/payment day is neither 1-31 nor a month-end sentinel"""

    pass


class MissingBillingAccountError(DomainException):
    """Card payment requested without the billing account that owns it"""

    pass


class InvalidPaymentShiftError(DomainException):
    """Payment month shift outside 0-2"""

    pass
