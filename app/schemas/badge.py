# app/schemas/badge.py
from typing import Optional
from pydantic import BaseModel
from decimal import Decimal
import uuid
from app.models.enums import BadgeCriteria

class BadgeRead(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    criteria: BadgeCriteria
    threshold: Decimal

    class Config:
        from_attributes = True
