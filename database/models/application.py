import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, Index, func

from .base import Base


class JobApplication(Base):
    __tablename__ = 'job_applications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    applicant_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    status = Column(Text, nullable=False, default='submitted')
    cover_letter = Column(Text)
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('job_id', 'applicant_id', name='uq_job_applications_job_applicant'),
        Index('idx_job_applications_applicant', 'applicant_id'),
    )
