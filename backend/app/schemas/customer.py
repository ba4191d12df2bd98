from pydantic import BaseModel, Field
from typing import List


class CustomerImageResponse(BaseModel):
    id: int
    customer_id: int = Field(alias="customerId")
    base64_data: str = Field(alias="base64Data")

    class Config:
        from_attributes = True
        populate_by_name = True


class CustomerResponse(BaseModel):
    id: int
    name: str
    images: List[CustomerImageResponse] = []

    class Config:
        from_attributes = True


class ImageCountResponse(BaseModel):
    customer_id: int = Field(alias="customerId")
    image_count: int = Field(alias="imageCount")

    class Config:
        populate_by_name = True
