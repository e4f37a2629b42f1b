# matchday/models/team.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from matchday.database import Base

class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    color = Column(String(20), nullable=True)

    players = relationship("Player", back_populates="team", order_by="Player.id")
