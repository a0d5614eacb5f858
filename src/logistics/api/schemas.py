"""Pydantic API schemas for the logistics services.

These are the external API contracts, kept separate from domain commands.
Routes translate between the two.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class LocationRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int


class NumberResponse(BaseModel):
    number: str


# ---------------------------------------------------------------------------
# Consolidations
# ---------------------------------------------------------------------------
class CreateConsolidationRequest(BaseModel):
    reference_code: str = Field(min_length=1, max_length=100)
    created_by: str = Field(min_length=1)
    master_tracking_number: str | None = None
    warehouse_id: str | None = None
    notes: str | None = None
    parcels: list[str] = Field(default_factory=list)


class UpdateConsolidationStatusRequest(BaseModel):
    status: str
    note: str | None = None
    location: LocationRequest | None = None


class AssignDriverRequest(BaseModel):
    driver_id: str = Field(min_length=1)
    estimated_delivery_time: datetime | None = None


class AddParcelRequest(BaseModel):
    parcel_id: str = Field(min_length=1)


class UpdateConsolidationRequest(BaseModel):
    reference_code: str | None = Field(default=None, min_length=1, max_length=100)
    warehouse_id: str | None = None
    notes: str | None = None


class AssignmentResponse(BaseModel):
    consolidation_id: str
    delivery_id: str


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------
class AssignDeliveryRequest(AssignDriverRequest):
    consolidation_id: str = Field(min_length=1)


class EndDeliveryRequest(LocationRequest):
    notes: str | None = None


class CancelDeliveryRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------
class ChargesRequest(BaseModel):
    """Charge components. A ``total`` sent by clients is accepted and ignored."""

    service_fee: float | None = Field(default=None, ge=0)
    handling_fee: float | None = Field(default=None, ge=0)
    discount: float | None = Field(default=None, ge=0)
    total: float | None = None


class CreateReceiptRequest(BaseModel):
    consolidation_id: str = Field(min_length=1)
    total_parcels: int = Field(ge=1)
    total_weight: float | None = Field(default=None, ge=0)
    charges: ChargesRequest = Field(default_factory=ChargesRequest)
    issued_by: str | None = None
    receipt_number: str | None = None


class UpdateReceiptRequest(BaseModel):
    consolidation_id: str | None = None
    total_parcels: int | None = Field(default=None, ge=1)
    total_weight: float | None = Field(default=None, ge=0)
    issued_by: str | None = None
    charges: ChargesRequest | None = None


# ---------------------------------------------------------------------------
# Customer requests
# ---------------------------------------------------------------------------
class SubmitRequestRequest(BaseModel):
    customer_id: str = Field(min_length=1)
    notes: str | None = None
    request_number: str | None = None


class UpdateRequestStatusRequest(BaseModel):
    status: str
    processed_by: str | None = None
    notes: str | None = None


class ApproveRequestRequest(BaseModel):
    processed_by: str = Field(min_length=1)
    consolidation_id: str | None = None


class RejectRequestRequest(BaseModel):
    processed_by: str = Field(min_length=1)
    reason: str = Field(min_length=1)


class ProcessRequestRequest(BaseModel):
    processed_by: str = Field(min_length=1)
    consolidation_id: str = Field(min_length=1)


class UpdateRequestRequest(BaseModel):
    customer_id: str | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class RetryFailedResponse(BaseModel):
    retried: int
