import uuid

from sqlalchemy import Column, Text, Integer, TIMESTAMP, Uuid, func

from .base import Base


class Company(Base):
    __tablename__ = 'companies'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Basic info
    company_name = Column(Text)
    legal_name = Column(Text)
    tax_id = Column(Text, unique=True)
    phone = Column(Text)

    # Location
    region_id = Column(Integer)
    municipality_id = Column(Integer)
    address = Column(Text)

    # Classification
    industry_id = Column(Integer)
    company_size = Column(Text)

    # Presentation
    description = Column(Text)
    logo_url = Column(Text)
    website_url = Column(Text)
    linkedin_url = Column(Text)
    mission = Column(Text)
    vision = Column(Text)
    benefits = Column(Text)

    completeness_percentage = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
