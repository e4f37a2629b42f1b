from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    JSON,
)

from sqlalchemy.orm import relationship
from matchday.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    event_type = Column(String, nullable=False)  # VOTE_CONFIRMATION, EMAIL_VERIFICATION
    channel = Column(String, nullable=False)  # email
    status = Column(String, default="pending", index=True)  # pending, ready, sending, sent, failed

    payload = Column(JSON, nullable=False)

    attempts = Column(Integer, default=0, nullable=False)
    last_error = Column(Text, nullable=True)

    available_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    sent_at = Column(DateTime, nullable=True)

    user = relationship("User", lazy="joined")
