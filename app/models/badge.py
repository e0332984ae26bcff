# app/models/badge.py
import uuid
from sqlalchemy import Column, String, Numeric, ForeignKey, Enum, Uuid, Table
from app.core.database import Base
from app.models.enums import BadgeCriteria

user_badges = Table(
    "user_badges",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("badge_id", Uuid, ForeignKey("badges.id", ondelete="CASCADE"), primary_key=True),
)

class Badge(Base):
    __tablename__ = "badges"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(length=100), nullable=False, unique=True)
    description = Column(String(length=255), nullable=True)
    criteria = Column(Enum(BadgeCriteria, name="badge_criteria"), nullable=False)
    threshold = Column(Numeric(12, 2), nullable=False)

    def __repr__(self):
        return f"<Badge name={self.name} criteria={self.criteria} threshold={self.threshold}>"
