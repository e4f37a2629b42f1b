# matchday/models/player.py

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from matchday.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    position = Column(String(30), nullable=True)

    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    team = relationship("Team", back_populates="players")

    # Contador denormalizado, lo incrementa la determinación de MOTM
    motm_awards = Column(Integer, default=0, nullable=False)

    # Estadísticas acumuladas, las actualiza cada evento del partido
    goals = Column(Integer, default=0, nullable=False)
    assists = Column(Integer, default=0, nullable=False)
    yellow_cards = Column(Integer, default=0, nullable=False)
    red_cards = Column(Integer, default=0, nullable=False)

    votes = relationship("MatchVote", back_populates="player")
    awards = relationship("MotmAward", back_populates="player")
    events = relationship("MatchEvent", back_populates="player")
