"""
Menu request schemas
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class MenuItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Item name")
    price: Decimal = Field(..., ge=0, description="Price in RM")
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    available: bool = True


class MenuItemUpdateRequest(BaseModel):
    """Only the fields that are sent are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    available: Optional[bool] = None
