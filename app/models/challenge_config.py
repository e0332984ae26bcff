# app/models/challenge_config.py
import uuid
from sqlalchemy import Column, String, Numeric, ForeignKey, Enum, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.enums import Motivation

class ChallengeConfig(Base):
    __tablename__ = "challenge_configs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # One config per user; the unique constraint settles concurrent creates
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    motivation = Column(Enum(Motivation, name="motivation"), nullable=False, default=Motivation.MEDIUM)
    target_min = Column(Numeric(12, 2), nullable=False)
    target_max = Column(Numeric(12, 2), nullable=False)

    user = relationship("User", back_populates="challenge_config")
    challenge_types = relationship(
        "ChallengeTypeConfig",
        back_populates="config",
        cascade="all, delete-orphan",
        order_by="ChallengeTypeConfig.type",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("target_min > 0", name="ck_challenge_config_target_min_positive"),
        CheckConstraint("target_max >= target_min", name="ck_challenge_config_target_range"),
    )

    def __repr__(self):
        return f"<ChallengeConfig motivation={self.motivation} user_id={self.user_id}>"


class ChallengeTypeConfig(Base):
    __tablename__ = "challenge_type_configs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    config_id = Column(Uuid, ForeignKey("challenge_configs.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(length=100), nullable=False)
    # Price of one unit, e.g. one cup of coffee
    specific_amount = Column(Numeric(12, 2), nullable=False)
    # What the user usually spends on this type within a streak window
    general_amount = Column(Numeric(12, 2), nullable=True)

    config = relationship("ChallengeConfig", back_populates="challenge_types")

    __table_args__ = (
        UniqueConstraint("config_id", "type", name="uq_challenge_type_configs_config_type"),
    )

    def __repr__(self):
        return f"<ChallengeTypeConfig type={self.type} config_id={self.config_id}>"
