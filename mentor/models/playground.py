from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from datetime import datetime
from mentor.database import Base, generate_uuid


class CodeSnippet(Base):
    __tablename__ = "code_snippets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    language = Column(String(20), nullable=False)
    code = Column(Text, nullable=False)
    stdin = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
