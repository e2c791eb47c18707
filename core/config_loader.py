import yaml
import os
from typing import Optional
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = False


class MatchWeights(BaseModel):
    """
    Category maxima for the match score (must sum to 100).

    The preferred skills bonus is carved out of the skills maximum; it only
    applies when a job lists preferred skills.
    """
    version: str = "2024.1"
    skills: float = Field(35.0, ge=0)
    preferred_skills_bonus: float = Field(5.0, ge=0)
    languages: float = Field(15.0, ge=0)
    location: float = Field(15.0, ge=0)
    experience: float = Field(15.0, ge=0)
    education: float = Field(10.0, ge=0)
    accommodations: float = Field(10.0, ge=0)

    model_config = {"frozen": True}

    def category_maxima(self) -> dict:
        return {
            "skills": self.skills,
            "languages": self.languages,
            "location": self.location,
            "experience": self.experience,
            "education": self.education,
            "accommodations": self.accommodations,
        }


class RankingConfig(BaseModel):
    """
    Configuration for the RecommendationRanker.

    Pool limits bound how many rows the stores hydrate per request.
    """
    max_workers: int = Field(4, ge=1)
    default_page_size: int = Field(20, ge=1)
    max_page_size: int = Field(100, ge=1)
    job_pool_limit: int = Field(200, ge=1)
    candidate_pool_limit: int = Field(500, ge=1)
    min_candidate_completeness: int = Field(50, ge=0, le=100)
    timeout_seconds: Optional[float] = Field(None, gt=0)


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.
    """
    weights: MatchWeights = Field(default_factory=MatchWeights)
    ranking: RankingConfig = Field(default_factory=RankingConfig)


class AppConfig(BaseModel):
    database: DatabaseConfig
    matching: MatchingConfig = Field(default_factory=MatchingConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path, fall back to the repository root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if not data.get('database'):
            data['database'] = {}
        data['database']['url'] = env_db_url

    return AppConfig(**data)
