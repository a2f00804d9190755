"""Issuing business profile."""

from pydantic import BaseModel


class Issuer(BaseModel):
    """Business details printed on invoices. Read-only render input."""

    business_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    state_code: str | None = "09"
    tax_id: str | None = None
    phone: str | None = None
    email: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    swift_code: str | None = None
