"""
Customers and their image attachments. Enforces the per-customer image quota.

Every function takes the caller's Session and runs as one transaction.
Mutations open a write transaction, lock the customer row and count its
images inside it, so two concurrent appends can never both pass the quota
check. Reads use an ordinary transaction and never wait on writers.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.audit import AuditLog
from app.core.encoding import decode_image, encode_image
from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.db.session import WRITE_TRANSACTION
from app.models.customer import NAME_MAX_LENGTH, Customer
from app.models.customer_image import CustomerImage

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_CUSTOMER = 10


@contextmanager
def _store_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise any database failure as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{action} failed: {type(e).__name__}: {e}", exc_info=True)
        raise StoreError(str(e)) from e


def _begin_write(db: Session) -> None:
    """Start a write transaction (BEGIN IMMEDIATE on SQLite)."""
    if db.in_transaction():
        db.commit()
    db.connection(execution_options=WRITE_TRANSACTION)


def _commit(db: Session) -> None:
    with _store_errors(db, "Commit"):
        db.commit()


def _lock_customer(db: Session, customer_id: int) -> Customer:
    """Load the customer row under a write lock for the rest of the transaction."""
    with _store_errors(db, f"Locking customer {customer_id}"):
        _begin_write(db)
        customer = (
            db.query(Customer)
            .filter(Customer.id == customer_id)
            .with_for_update()
            .first()
        )
    if not customer:
        db.rollback()
        raise NotFoundError.customer()
    return customer


def _count(db: Session, customer_id: int) -> int:
    return (
        db.query(func.count(CustomerImage.id))
        .filter(CustomerImage.customer_id == customer_id)
        .scalar()
    )


def _check_batch_size(files: Sequence[bytes]) -> None:
    if len(files) > MAX_IMAGES_PER_CUSTOMER:
        raise ValidationError(f"Maximum {MAX_IMAGES_PER_CUSTOMER} images allowed per customer.")


def _new_images(files: Sequence[bytes]) -> List[CustomerImage]:
    return [CustomerImage(base64_data=encode_image(payload)) for payload in files]


def create_customer(db: Session, name: str | None, files: Sequence[bytes] = ()) -> Customer:
    """Create a customer and its initial images (input order) in one transaction."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Customer name is required.")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Customer name must be at most {NAME_MAX_LENGTH} characters.")
    _check_batch_size(files)

    with _store_errors(db, "Creating customer"):
        _begin_write(db)
        customer = Customer(name=name)
        customer.images.extend(_new_images(files))
        db.add(customer)
        db.commit()
        db.refresh(customer)

    AuditLog.log_action("create", "customer", customer.id, changes={"image_count": len(files)})
    return customer


def list_customers(db: Session) -> List[Customer]:
    with _store_errors(db, "Listing customers"):
        return (
            db.query(Customer)
            .options(selectinload(Customer.images))
            .order_by(Customer.id)
            .all()
        )


def get_customer(db: Session, customer_id: int) -> Customer:
    with _store_errors(db, f"Loading customer {customer_id}"):
        customer = (
            db.query(Customer)
            .options(selectinload(Customer.images))
            .filter(Customer.id == customer_id)
            .first()
        )
    if not customer:
        raise NotFoundError.customer()
    return customer


def get_image_bytes(db: Session, customer_id: int, image_id: int) -> bytes:
    """Decoded bytes of one image. The image must belong to the given customer."""
    with _store_errors(db, f"Loading image {image_id}"):
        image = (
            db.query(CustomerImage)
            .filter(CustomerImage.customer_id == customer_id, CustomerImage.id == image_id)
            .first()
        )
    if not image:
        raise NotFoundError.image()
    return decode_image(image.base64_data)


def replace_images(db: Session, customer_id: int, files: Sequence[bytes]) -> Customer:
    """Drop every existing image and store `files` instead. All or nothing."""
    customer = _lock_customer(db, customer_id)
    try:
        _check_batch_size(files)
    except ValidationError:
        db.rollback()
        raise

    with _store_errors(db, f"Replacing images of customer {customer_id}"):
        removed = len(customer.images)
        customer.images.clear()
        customer.images.extend(_new_images(files))
        db.commit()
        db.refresh(customer)

    AuditLog.log_action(
        "replace", "customer_images", customer_id,
        changes={"removed": removed, "image_count": len(files)},
    )
    return customer


def add_images(db: Session, customer_id: int, files: Sequence[bytes]) -> Customer:
    """Append `files` to the customer's images if the result stays within quota."""
    customer = _lock_customer(db, customer_id)
    with _store_errors(db, f"Counting images of customer {customer_id}"):
        current = _count(db, customer_id)
    available = MAX_IMAGES_PER_CUSTOMER - current
    if len(files) > available:
        db.rollback()
        raise ValidationError(
            f"Only {available} more allowed (limit {MAX_IMAGES_PER_CUSTOMER} images per customer)."
        )

    with _store_errors(db, f"Adding images to customer {customer_id}"):
        customer.images.extend(_new_images(files))
        db.commit()
        db.refresh(customer)

    AuditLog.log_action(
        "add", "customer_images", customer_id,
        changes={"added": len(files), "image_count": current + len(files)},
    )
    return customer


def delete_all_images(db: Session, customer_id: int) -> None:
    customer = _lock_customer(db, customer_id)
    with _store_errors(db, f"Deleting images of customer {customer_id}"):
        removed = len(customer.images)
        customer.images.clear()
        db.commit()

    AuditLog.log_action("delete_all", "customer_images", customer_id, changes={"removed": removed})


def count_images(db: Session, customer_id: int) -> int:
    with _store_errors(db, f"Counting images of customer {customer_id}"):
        exists = db.query(Customer.id).filter(Customer.id == customer_id).first()
        count = _count(db, customer_id) if exists else 0
    if not exists:
        raise NotFoundError.customer()
    return count


def delete_customer(db: Session, customer_id: int) -> None:
    """Delete a customer; its images go with it (FK cascade)."""
    customer = _lock_customer(db, customer_id)
    db.delete(customer)
    _commit(db)

    AuditLog.log_action("delete", "customer", customer_id)
