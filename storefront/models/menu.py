"""
Menu models
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base import BaseEntity, TimestampMixin


class MenuItem(BaseEntity, TimestampMixin):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, description="Price in RM")
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    available: bool = True
