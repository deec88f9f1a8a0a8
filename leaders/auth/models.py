# leaders/auth/models.py
from enum import Enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON

from leaders.db.session import Base


class Role(str, Enum):
    ADMIN = "Admin"
    INSTRUCTOR = "Instructeur"
    PARTICIPANT = "Participant"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.PARTICIPANT.value)

    # Profil
    photo = Column(String(500), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    languages = Column(JSON, nullable=True)
    interests = Column(JSON, nullable=True)
    intentions = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

    @property
    def full_name(self):
        """Propriété calculée pour le nom complet"""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def display_name(self):
        """Nom d'affichage pour l'interface utilisateur"""
        return self.full_name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
