# app/models/challenge.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Numeric, DateTime, Date, ForeignKey, Uuid, CheckConstraint, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.money import percentage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(length=100), nullable=False)
    description = Column(String(length=255), nullable=True)
    type = Column(String(length=100), nullable=True)
    target = Column(Numeric(12, 2), nullable=False)
    saved = Column(Numeric(12, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=True)

    created_on = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    # NULL while active; set exactly once by completion
    completed_on = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="challenges")

    __table_args__ = (
        CheckConstraint("target > 0", name="ck_challenges_target_positive"),
        CheckConstraint("saved >= 0", name="ck_challenges_saved_non_negative"),
        Index("ix_challenges_user_completed_on", "user_id", "completed_on"),
    )

    @property
    def completion(self):
        """Percentage of the target saved so far, derived from saved/target."""
        return percentage(self.saved, self.target)

    @property
    def is_completed(self) -> bool:
        return self.completed_on is not None

    def __repr__(self):
        return f"<Challenge title={self.title} target={self.target} user_id={self.user_id}>"
