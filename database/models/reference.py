import uuid

from sqlalchemy import Column, Text, Boolean, Uuid

from .base import Base


class Skill(Base):
    """Catalogue of skills referenced by seekers and job requirements."""
    __tablename__ = 'skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    category = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)


class Language(Base):
    __tablename__ = 'languages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    iso_code = Column(Text)
