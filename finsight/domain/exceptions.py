"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """Transaction, budget or goal data is malformed or invalid"""

    pass


class InvalidParameterError(DomainException):
    """Argument passed to an analytics operation is out of range or mistyped"""

    pass


class MetricUnavailableError(DomainException):
    """A computed metric came out as NaN or Infinity"""

    pass


class RecordNotFoundError(DomainException):
    """Requested record does not exist in the store"""

    pass
