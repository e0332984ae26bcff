# app/schemas/challenge.py
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
import uuid

class ChallengeBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=100)
    target: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    saved: Decimal = Field(Decimal("0.00"), ge=0, max_digits=12, decimal_places=2)
    due_date: Optional[date] = None

class ChallengeCreate(ChallengeBase):
    """Creation payload; also the shape of a generated, unsaved proposal"""
    pass

class ChallengeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=100)
    target: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    saved: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    due_date: Optional[date] = None

class ChallengeRead(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    target: Decimal
    saved: Decimal
    completion: Decimal
    due_date: Optional[date] = None
    created_on: datetime
    completed_on: Optional[datetime] = None

    class Config:
        from_attributes = True

class ChallengePage(BaseModel):
    items: List[ChallengeRead]
    total: int
    page: int
    size: int
    pages: int
