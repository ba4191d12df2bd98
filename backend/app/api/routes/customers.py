"""Customers and their uploaded images (stored base64 encoded, max 10 per customer)."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.encoding import guess_media_type
from app.schemas.customer import CustomerResponse, ImageCountResponse
from app.schemas.response import ApiResponse, success
from app.services import customer_image_service as service

router = APIRouter()

# Ids are SQLite INTEGER (signed 64-bit); larger values never name a row
MAX_ROW_ID = 2**63 - 1


def _read_uploads(files: Optional[List[UploadFile]]) -> List[bytes]:
    return [upload.file.read() for upload in files or []]


def _customer_envelope(message: str, customer) -> ApiResponse:
    return success(message, CustomerResponse.model_validate(customer))


@router.post("", response_model=ApiResponse[CustomerResponse])
def create_customer(
    name: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
):
    """Create a customer with optional uploaded images (max 10)."""
    payloads = _read_uploads(files)
    customer = service.create_customer(db, name, payloads)
    return _customer_envelope(f"{len(payloads)} file(s) uploaded successfully.", customer)


@router.get("", response_model=ApiResponse[List[CustomerResponse]])
def list_customers(db: Session = Depends(get_db)):
    """All customers with their images."""
    customers = service.list_customers(db)
    return success(
        f"{len(customers)} customer(s) retrieved.",
        [CustomerResponse.model_validate(c) for c in customers],
    )


@router.get("/{customer_id}", response_model=ApiResponse[CustomerResponse])
def get_customer(customer_id: int = Path(..., ge=1, le=MAX_ROW_ID), db: Session = Depends(get_db)):
    customer = service.get_customer(db, customer_id)
    return _customer_envelope("Customer retrieved.", customer)


@router.delete("/{customer_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_customer(customer_id: int = Path(..., ge=1, le=MAX_ROW_ID), db: Session = Depends(get_db)):
    """Delete a customer together with all of its images."""
    service.delete_customer(db, customer_id)
    return success("Customer deleted.")


@router.get("/{customer_id}/images/{image_id}/preview", response_class=Response)
def preview_image(
    request: Request,
    customer_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    image_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: Session = Depends(get_db),
):
    """Raw image bytes (decoded from base64) for preview/download."""
    payload = service.get_image_bytes(db, customer_id, image_id)
    media_type = guess_media_type(payload, default=request.app.state.settings.PREVIEW_DEFAULT_MEDIA_TYPE)
    return Response(content=payload, media_type=media_type)


@router.put("/{customer_id}/images", response_model=ApiResponse[CustomerResponse])
def replace_images(
    customer_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
):
    """Replace all images for a customer."""
    payloads = _read_uploads(files)
    customer = service.replace_images(db, customer_id, payloads)
    return _customer_envelope(f"{len(payloads)} file(s) replaced successfully.", customer)


@router.patch("/{customer_id}/images", response_model=ApiResponse[CustomerResponse])
@router.post("/{customer_id}/images", response_model=ApiResponse[CustomerResponse])
def add_images(
    customer_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
):
    """Add images for a customer, up to the per-customer limit."""
    payloads = _read_uploads(files)
    customer = service.add_images(db, customer_id, payloads)
    return _customer_envelope(f"{len(payloads)} file(s) added successfully.", customer)


@router.delete("/{customer_id}/images", response_model=ApiResponse[None], response_model_exclude_none=True)
def delete_all_images(customer_id: int = Path(..., ge=1, le=MAX_ROW_ID), db: Session = Depends(get_db)):
    """Delete ALL images for a customer. The customer itself is kept."""
    service.delete_all_images(db, customer_id)
    return success("All images deleted successfully.")


@router.get("/{customer_id}/images/count", response_model=ApiResponse[ImageCountResponse])
def count_images(customer_id: int = Path(..., ge=1, le=MAX_ROW_ID), db: Session = Depends(get_db)):
    count = service.count_images(db, customer_id)
    return success(
        f"Customer {customer_id} has {count} image(s).",
        ImageCountResponse(customer_id=customer_id, image_count=count),
    )
