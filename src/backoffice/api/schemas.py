"""Pydantic request/response schemas for the back-office API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class CustomerRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "email": "jane.doe@example.com",
                    "phone": "+27 31 555 0123",
                    "city": "Durban",
                }
            ]
        }
    }

    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=20)
    city: str = Field(..., max_length=100)


class UpdateCustomerRequest(CustomerRequest):
    etag: str | None = None


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "category": "Grocery",
                    "name": "Milk",
                    "description": "Full cream, 2L",
                    "price": 24.99,
                    "stock_quantity": 40,
                }
            ]
        }
    }

    category: str = Field(..., max_length=100)
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., allow_inf_nan=False)
    stock_quantity: int = 0
    image_base64: str | None = None
    image_name: str = Field("", max_length=255)


class UpdateProductRequest(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., allow_inf_nan=False)
    stock_quantity: int = 0
    category: str | None = Field(None, max_length=100)
    image_base64: str | None = None
    image_name: str = Field("", max_length=255)
    etag: str | None = None


class OrderLineRequest(BaseModel):
    product_id: str = ""
    quantity: int = 1


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "5f0c3a0e9d2b4e7f8a1b2c3d4e5f6a7b",
                    "items": [{"product_id": "0a1b2c3d4e5f60718293a4b5c6d7e8f9", "quantity": 2}],
                }
            ]
        }
    }

    customer_id: str
    items: list[OrderLineRequest] = Field(default_factory=list)
    status: str | None = None


class OrderStatusRequest(BaseModel):
    status: str | None = None
    etag: str | None = None


class UploadContractRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"file_name": "lease.pdf", "display_name": "Durban lease", "content_base64": "JVBERi0xLjQK"}
            ]
        }
    }

    file_name: str = Field(..., max_length=255)
    display_name: str | None = Field(None, max_length=200)
    content_base64: str


# --- Response Schemas ---


class StoredEntityResponse(BaseModel):
    partition_id: str
    unique_id: str
    etag: str | None = None
    last_modified: datetime | None = None


class CustomerResponse(StoredEntityResponse):
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    city: str


class ProductResponse(StoredEntityResponse):
    category: str
    name: str
    description: str | None = None
    price: float
    stock_quantity: int
    image_url: str | None = None
    has_image: bool = False


class LineItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float


class OrderResponse(StoredEntityResponse):
    customer_id: str
    items: list[LineItemResponse]
    total: float
    status: str


class ContractFileResponse(BaseModel):
    name: str
    size: int
    last_modified: datetime | None = None


class UploadedContractResponse(BaseModel):
    name: str


class EventsResponse(BaseModel):
    messages: list[str]


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
