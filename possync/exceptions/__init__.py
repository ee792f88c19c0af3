"""Custom exceptions for the point-of-sale sync core."""
from possync.utils.formatters import format_quantity, format_money


class PosError(Exception):
    """Base exception for all core errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ValidationError(PosError):
    """Caller-supplied input violates a precondition. Raised before any remote call."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class NotFoundError(PosError):
    """Raised when a referenced entity is not present in the local mirror."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class InsufficientStockError(ValidationError):
    """Raised when a cart operation would exceed the derived stock of a variant."""
    def __init__(self, product_name, required, available):
        self.product_name = product_name
        self.required = required
        self.available = available
        message = (
            f"Not enough stock for {product_name}: "
            f"{format_quantity(required)} required, {format_quantity(available)} available"
        )
        super().__init__(message, status_code=409, payload={'required': str(required), 'available': str(available)})


class OutstandingDebtError(ValidationError):
    """Raised when deleting a customer or supplier that still has an open balance."""
    def __init__(self, party_name, debt, currency_symbol='DH'):
        self.party_name = party_name
        self.debt = debt
        super().__init__(
            f'{party_name} still has an outstanding balance of {format_money(debt, currency_symbol)}',
            status_code=409,
            payload={'debt': str(debt)}
        )


class RemoteFailure(PosError):
    """The authoritative store rejected or could not complete a request."""
    def __init__(self, message, status_code=502, payload=None):
        super().__init__(message, status_code, payload)
