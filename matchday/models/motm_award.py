from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from matchday.database import Base


class MotmAward(Base):
    __tablename__ = "motm_awards"

    id = Column(Integer, primary_key=True)
    # unique: un solo MOTM por partido aunque corran dos determinaciones a la vez
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, unique=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    vote_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    match = relationship("Match", back_populates="motm_award")
    player = relationship("Player", back_populates="awards")
