from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.job import JobRepository
from database.repositories.company import CompanyRepository
from database.repositories.application import ApplicationRepository
from database.repositories.reference import ReferenceRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'JobRepository',
    'CompanyRepository',
    'ApplicationRepository',
    'ReferenceRepository',
]
