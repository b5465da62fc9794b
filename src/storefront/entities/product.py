"""Entity: Product."""

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A vendor's product as listed in the storefront.

    Rows are owned by the hosted platform; this is a read-only mirror.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Product identifier")
    name: str = Field(description="Display name")
    description: str | None = Field(default=None, description="Long description")
    price: float | None = Field(default=None, description="Unit price")
    stock: int | None = Field(default=None, description="Units in stock")
    image_url: str | None = Field(default=None, description="Image reference")
    vendor_id: str | None = Field(default=None, description="Owning vendor")
    created_at: str | None = Field(default=None, description="Creation timestamp")
