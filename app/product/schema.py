# app/product/schema.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from datetime import datetime
from enum import Enum

class ProductTypeEnum(str, Enum):
    product = "product"
    membership = "membership"

class ProductBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    cover_image: Optional[str] = None
    type: ProductTypeEnum = ProductTypeEnum.product
    membership_duration: Optional[int] = Field(None, gt=0, description="Days of access, memberships only")
    is_active: bool = True

class ProductCreate(ProductBase):

    @model_validator(mode="after")
    def check_duration(self):
        if self.type == ProductTypeEnum.membership and not self.membership_duration:
            raise ValueError("membership_duration is required for membership products")
        if self.type == ProductTypeEnum.product and self.membership_duration is not None:
            raise ValueError("membership_duration only applies to membership products")
        return self

class ProductUpdate(BaseModel):
    # All fields optional for updates; type is fixed once created
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    cover_image: Optional[str] = None
    membership_duration: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None

class ProductOut(ProductBase):
    id: int
    creator_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
