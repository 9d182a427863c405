"""
Base data models
Common base classes and timestamp fields
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class BaseEntity(BaseModel):
    """Stored document; `id` is the document id"""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]):
        return cls.model_validate(doc) if doc is not None else None

    def to_document(self) -> Dict[str, Any]:
        """JSON-safe dict for the document store"""
        return self.model_dump(mode="json", exclude={"id"})


class TimestampMixin(BaseModel):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
