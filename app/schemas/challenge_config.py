# app/schemas/challenge_config.py
from typing import Optional, List
from pydantic import BaseModel, Field
from decimal import Decimal
from app.models.enums import Motivation

class ChallengeTypeConfigBase(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    specific_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    general_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

class ChallengeTypeConfigCreate(ChallengeTypeConfigBase):
    pass

class ChallengeTypeConfigUpdate(BaseModel):
    specific_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    general_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

class ChallengeTypeConfigRead(ChallengeTypeConfigBase):
    class Config:
        from_attributes = True

class ChallengeConfigBase(BaseModel):
    motivation: Motivation = Motivation.MEDIUM
    target_min: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    target_max: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)

class ChallengeConfigCreate(ChallengeConfigBase):
    challenge_types: List[ChallengeTypeConfigCreate] = []

class ChallengeConfigUpdate(ChallengeConfigBase):
    """Full replacement of the mutable fields; type configs are replaced only if given"""
    challenge_types: Optional[List[ChallengeTypeConfigCreate]] = None

class ChallengeConfigRead(ChallengeConfigBase):
    challenge_types: List[ChallengeTypeConfigRead] = []

    class Config:
        from_attributes = True
