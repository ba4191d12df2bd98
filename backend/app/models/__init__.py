from app.models.customer import Customer
from app.models.customer_image import CustomerImage

__all__ = ["Customer", "CustomerImage"]
