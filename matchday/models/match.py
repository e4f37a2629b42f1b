from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from matchday.database import Base
import enum


class MatchStatus(enum.Enum):
    scheduled = "scheduled"
    live = "live"
    finished = "finished"


# Único orden permitido: scheduled -> live -> finished
ALLOWED_STATUS_TRANSITIONS = {
    MatchStatus.scheduled: {MatchStatus.live},
    MatchStatus.live: {MatchStatus.finished},
    MatchStatus.finished: set(),
}


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True)
    match_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    status = Column(Enum(MatchStatus), nullable=False, default=MatchStatus.scheduled, index=True)

    home_team_id = Column(
        Integer,
        ForeignKey("teams.id", name="fk_matches_home_team_id"),
        nullable=False,
    )
    away_team_id = Column(
        Integer,
        ForeignKey("teams.id", name="fk_matches_away_team_id"),
        nullable=False,
    )

    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    # Al pasar a finished marca la hora de finalización (inicio del período de gracia)
    updated_at = Column(DateTime, nullable=True, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("home_team_id <> away_team_id", name="ck_matches_distinct_teams"),
    )

    home_team = relationship("Team", foreign_keys=[home_team_id])
    away_team = relationship("Team", foreign_keys=[away_team_id])

    votes = relationship("MatchVote", back_populates="match", cascade="all, delete-orphan")
    events = relationship(
        "MatchEvent",
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="MatchEvent.minute",
    )
    motm_award = relationship("MotmAward", back_populates="match", uselist=False)

    @property
    def team_ids(self) -> set[int]:
        return {self.home_team_id, self.away_team_id}

    @property
    def label(self) -> str:
        home = self.home_team.name if self.home_team else f"Team {self.home_team_id}"
        away = self.away_team.name if self.away_team else f"Team {self.away_team_id}"
        return f"{home} vs {away}"
