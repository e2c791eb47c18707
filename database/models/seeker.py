import uuid

from sqlalchemy import (
    Column, Text, Boolean, Integer, Date, TIMESTAMP, ForeignKey, JSON, Uuid,
    UniqueConstraint, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    Platform account. Only job seekers carry a JobSeekerProfile.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    first_name = Column(Text)
    last_name = Column(Text)
    account_type = Column(Text, nullable=False, default='job_seeker')  # job_seeker|company_member|omil_member|admin
    account_status = Column(Text, nullable=False, default='active')  # active|suspended|deleted
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    profile = relationship("JobSeekerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")


class JobSeekerProfile(Base):
    __tablename__ = 'job_seeker_profiles'

    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)

    # Basic info
    phone = Column(Text)
    date_of_birth = Column(Date)
    region_id = Column(Integer)
    municipality_id = Column(Integer)
    address = Column(Text)

    # Presentation
    bio = Column(Text)
    professional_headline = Column(Text)
    profile_image_url = Column(Text)
    cv_url = Column(Text)

    completeness_percentage = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")
    skills = relationship("UserSkill", cascade="all, delete-orphan", order_by="UserSkill.id")
    languages = relationship("UserLanguage", cascade="all, delete-orphan", order_by="UserLanguage.id")
    education = relationship("EducationRecord", cascade="all, delete-orphan", order_by="EducationRecord.id")
    work_experiences = relationship("WorkExperience", cascade="all, delete-orphan", order_by="WorkExperience.id")
    portfolio_items = relationship("PortfolioItem", cascade="all, delete-orphan", order_by="PortfolioItem.id")
    disability = relationship("JobSeekerDisability", uselist=False, cascade="all, delete-orphan")
    preferences = relationship("UserPreferences", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_job_seeker_profiles_completeness', 'completeness_percentage'),
    )


class UserSkill(Base):
    __tablename__ = 'user_skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.id'), nullable=False)
    proficiency_level = Column(Integer, nullable=False)  # 1-5
    years_of_experience = Column(Integer)

    __table_args__ = (
        UniqueConstraint('user_id', 'skill_id', name='uq_user_skills_user_skill'),
    )


class UserLanguage(Base):
    __tablename__ = 'user_languages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), nullable=False)
    language_id = Column(Uuid, ForeignKey('languages.id'), nullable=False)
    proficiency = Column(Text, nullable=False)  # basic|intermediate|advanced|fluent|native

    __table_args__ = (
        UniqueConstraint('user_id', 'language_id', name='uq_user_languages_user_language'),
    )


class EducationRecord(Base):
    __tablename__ = 'education_records'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), nullable=False)
    level = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='completed')  # in_progress|completed|incomplete
    institution_name = Column(Text)
    field_of_study = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)


class WorkExperience(Base):
    __tablename__ = 'work_experiences'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), nullable=False)
    company_name = Column(Text, nullable=False)
    position_title = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)  # NULL while current
    description = Column(Text)


class PortfolioItem(Base):
    __tablename__ = 'portfolio_items'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    url = Column(Text)
    description = Column(Text)


class JobSeekerDisability(Base):
    __tablename__ = 'job_seeker_disabilities'

    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), primary_key=True)
    category = Column(Text, nullable=False)
    requires_accommodations = Column(Boolean, nullable=False, default=False)
    accommodation_tags = Column(JSON, nullable=False, default=list)


class UserPreferences(Base):
    __tablename__ = 'user_preferences'

    user_id = Column(Uuid, ForeignKey('job_seeker_profiles.user_id', ondelete='CASCADE'), primary_key=True)
    profile_visibility = Column(Text, nullable=False, default='public')  # public|hidden|applied_only
    show_disability_info = Column(Boolean, nullable=False, default=True)
    willing_to_relocate = Column(Boolean, nullable=False, default=False)
