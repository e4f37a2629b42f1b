from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from matchday.database import Base
import enum


class MatchEventType(enum.Enum):
    goal = "goal"
    assist = "assist"
    yellow_card = "yellow_card"
    red_card = "red_card"


class MatchEvent(Base):
    __tablename__ = "match_events"

    id = Column(Integer, primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(Enum(MatchEventType), nullable=False)
    minute = Column(Integer, nullable=False)
    description = Column(String(255), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("minute >= 0", name="ck_match_events_minute"),
    )

    match = relationship("Match", back_populates="events")
    player = relationship("Player", back_populates="events")
