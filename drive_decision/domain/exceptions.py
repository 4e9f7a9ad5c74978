"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException, ValueError):
    """A single input field violated its precondition"""

    def __init__(self, field: str, constraint: str):
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field} {constraint}")


class NarratorError(DomainException):
    """Narrative generation service failed or returned unusable output"""

    pass
