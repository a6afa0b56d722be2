# app/core/errors.py
"""
Typed failures raised by the settlement services.

Every error carries the HTTP status the API layer should answer with;
``main.py`` renders them through a single exception handler.
"""
from typing import Optional


class LedgerError(Exception):
    status_code = 400

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.__class__.__name__
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return self.__class__.__name__


class InvalidAmount(LedgerError):
    status_code = 400


class BelowMinimum(LedgerError):
    status_code = 400


class InsufficientBalance(LedgerError):
    status_code = 400


class InvalidPaymentDetails(LedgerError):
    status_code = 422


class NotFound(LedgerError):
    status_code = 404


class Forbidden(LedgerError):
    status_code = 403


class InvalidTransition(LedgerError):
    status_code = 409


class IntegrityMismatch(LedgerError):
    status_code = 409


class PaymentGatewayError(LedgerError):
    status_code = 502


class PaymentGatewayTimeout(PaymentGatewayError):
    status_code = 504


class InvalidSignature(LedgerError):
    status_code = 401
