import uuid

from sqlalchemy import (
    Column, Integer, Text, TIMESTAMP, ForeignKey, Boolean, Date, Numeric, Uuid,
    UniqueConstraint, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


class Job(Base):
    __tablename__ = 'jobs'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(Uuid, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)

    # Core identity
    title = Column(Text, nullable=False)
    description = Column(Text)
    responsibilities = Column(Text)
    benefits = Column(Text)
    status = Column(Text, nullable=False, default='draft')  # draft|pending_approval|active|paused|rejected|closed

    # Classification
    industry_id = Column(Integer)
    work_area_id = Column(Integer)
    position_level_id = Column(Integer)

    # Location
    region_id = Column(Integer)
    municipality_id = Column(Integer)
    work_modality = Column(Text, nullable=False, default='on_site')  # on_site|remote|hybrid
    is_remote_allowed = Column(Boolean, nullable=False, default=False)

    # Requirements
    salary_min = Column(Numeric)
    salary_max = Column(Numeric)
    years_experience_min = Column(Integer)
    years_experience_max = Column(Integer)
    age_min = Column(Integer)
    age_max = Column(Integer)
    education_level = Column(Text)

    application_deadline = Column(Date)
    completeness_percentage = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    required_skills = relationship("JobRequiredSkill", cascade="all, delete-orphan", order_by="JobRequiredSkill.id")
    preferred_skills = relationship("JobPreferredSkill", cascade="all, delete-orphan", order_by="JobPreferredSkill.id")
    languages = relationship("JobLanguage", cascade="all, delete-orphan", order_by="JobLanguage.id")
    accommodations = relationship("JobDisabilityAccommodation", cascade="all, delete-orphan", order_by="JobDisabilityAccommodation.id")

    __table_args__ = (
        Index('idx_jobs_status_deadline', 'status', 'application_deadline'),
        Index('idx_jobs_company', 'company_id'),
    )


class JobRequiredSkill(Base):
    __tablename__ = 'job_required_skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.id'), nullable=False)
    minimum_proficiency = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint('job_id', 'skill_id', name='uq_job_required_skills_job_skill'),
    )


class JobPreferredSkill(Base):
    __tablename__ = 'job_preferred_skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.id'), nullable=False)
    minimum_proficiency = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint('job_id', 'skill_id', name='uq_job_preferred_skills_job_skill'),
    )


class JobLanguage(Base):
    __tablename__ = 'job_languages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    language_id = Column(Uuid, ForeignKey('languages.id'), nullable=False)
    minimum_proficiency = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint('job_id', 'language_id', name='uq_job_languages_job_language'),
    )


class JobDisabilityAccommodation(Base):
    __tablename__ = 'job_disability_accommodations'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    category = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint('job_id', 'category', name='uq_job_accommodations_job_category'),
    )
