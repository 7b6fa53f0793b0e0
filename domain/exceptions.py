"""Domain Exceptions"""


class DomainError(Exception):
    """Base class for errors raised by the domain layer"""


class NotFoundError(DomainError):
    """Referenced aggregate does not exist"""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class InvalidStateError(DomainError, ValueError):
    """Lifecycle transition attempted from the wrong status"""

    def __init__(self, action: str, current_status):
        self.action = action
        self.current_status = getattr(current_status, "value", current_status)
        super().__init__(
            f"Cannot {action}. Current status: {self.current_status}"
        )
