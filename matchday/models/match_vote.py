from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    ForeignKey,
    UniqueConstraint
)
from sqlalchemy.orm import relationship

from matchday.database import Base

class MatchVote(Base):
    __tablename__ = "match_votes"

    id = Column(Integer, primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Un voto por usuario y partido, lo garantiza la base
    __table_args__ = (
        UniqueConstraint("match_id", "user_id", name="uq_match_vote_user"),
    )

    match = relationship("Match", back_populates="votes")
    player = relationship("Player", back_populates="votes")
    user = relationship("User", back_populates="votes")
