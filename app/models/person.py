"""
Registered people. Each row carries the encoded identity payload that was
rendered into the person's QR code at registration time.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class Person(Base):
    __tablename__ = "people"

    seq = Column(Integer, primary_key=True, autoincrement=True)   # insertion order
    id = Column(String(64), unique=True, nullable=False, index=True)
    owner_id = Column(String(100), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    enrollment_no = Column(String(100))
    email = Column(String(200))
    phone = Column(String(50))
    qr_code_data = Column(Text)              # JSON identity payload
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Person {self.id} name={self.name} owner={self.owner_id}>"
