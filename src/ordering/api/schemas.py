"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Amounts are integer minor units (paise).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = "India"


class OrderItemSchema(BaseModel):
    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None


class ContactSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    items: list[OrderItemSchema] = Field(default_factory=list)
    shipping_address: AddressSchema
    payment_method: str | None = None
    contact: ContactSchema | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-kurta-001", "quantity": 2, "size": "M", "color": "Blue"}],
                    "shipping_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postal_code": "560001",
                        "country": "India",
                    },
                    "payment_method": "COD",
                    "contact": {"name": "Asha Rao", "email": "asha@example.com", "phone": "9800000000"},
                }
            ]
        }
    }


class PartnerOrderRequest(BaseModel):
    user_id: str | None = None
    items: list[OrderItemSchema] = Field(default_factory=list)
    shipping_address: AddressSchema | None = None
    payment_method: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-kurta-001", "quantity": 1}],
                    "shipping_address": {
                        "street": "4 Park Street",
                        "city": "Kolkata",
                        "state": "West Bengal",
                        "postal_code": "700016",
                    },
                    "customer_email": "buyer@partner.example",
                    "customer_name": "Partner Buyer",
                }
            ]
        }
    }


class AdvanceTrackingRequest(BaseModel):
    status: str


class RecordPaymentStatusRequest(BaseModel):
    payment_status: str


class IssueApiKeyRequest(BaseModel):
    name: str
    description: str | None = None


class SetApiKeyActiveRequest(BaseModel):
    is_active: bool


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class TrackingStatusResponse(BaseModel):
    order_id: str
    status: str


class PaymentStatusResponse(BaseModel):
    order_id: str
    payment_status: str


class ApiKeyResponse(BaseModel):
    id: str
    key: str
    name: str
    is_active: bool


class ApiKeyStatusResponse(BaseModel):
    id: str
    is_active: bool
