"""Customer entities."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """A billable customer.

    ``created_at`` is assigned once by the data service and kept on
    every later update.
    """

    id: str | None = None
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    gstin: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def snapshot(self) -> "CustomerSnapshot":
        return CustomerSnapshot(**self.model_dump(exclude={"created_at"}))


class CustomerSnapshot(BaseModel):
    """Customer details frozen into a bill."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str = ""
    phone: str = ""
    email: str | None = None
    address: str | None = None
    gstin: str | None = None
