"""Entity: CustomerProfile."""

from pydantic import BaseModel, ConfigDict, Field


class CustomerProfile(BaseModel):
    """Customer-specific row stored beside the auth account.

    ``id`` is the auth account identifier; the two are joined on it.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Auth account identifier")
    first_name: str | None = Field(default=None, description="Customer's first name")
    last_name: str | None = Field(default=None, description="Customer's last name")
    email: str | None = Field(default=None, description="Customer's email address")
    phone: str | None = Field(default=None, description="Customer's phone number")
    address: str | None = Field(default=None, description="Customer's address")
    agree_to_terms: bool | None = Field(default=None, description="Accepted the terms")
    marketing_emails: bool | None = Field(
        default=None, description="Opted in to marketing email"
    )
    created_at: str | None = Field(default=None, description="Creation timestamp")

    @property
    def display_name(self) -> str:
        return self.first_name or "Customer"
