import logging
from typing import Any, Optional

from sqlalchemy import select

from core.aggregates import CompanySnapshot
from core.completeness import company_completeness
from core.exceptions import NotFoundError
from database.models import Company
from database.repositories.base import BaseRepository, db_read_retry, translate_errors

logger = logging.getLogger(__name__)

COMPANY_FIELDS = frozenset([
    'company_name', 'legal_name', 'tax_id', 'phone',
    'region_id', 'municipality_id', 'address',
    'industry_id', 'company_size',
    'description', 'logo_url', 'website_url', 'linkedin_url',
    'mission', 'vision', 'benefits',
])


def to_company_snapshot(company: Company) -> CompanySnapshot:
    return CompanySnapshot(id=company.id, **{name: getattr(company, name) for name in COMPANY_FIELDS})


class CompanyRepository(BaseRepository):
    @translate_errors("load company")
    @db_read_retry
    def get(self, company_id: Any) -> Optional[CompanySnapshot]:
        company = self.db.execute(select(Company).where(Company.id == company_id)).scalar_one_or_none()
        return to_company_snapshot(company) if company is not None else None

    def _require_company(self, company_id: Any) -> Company:
        company = self.db.get(Company, company_id)
        if company is None:
            raise NotFoundError("company", company_id)
        return company

    def _refresh_completeness(self, company: Company) -> int:
        company.completeness_percentage = company_completeness(to_company_snapshot(company))
        self.db.flush()
        return company.completeness_percentage

    @translate_errors("recompute company completeness")
    def recompute_completeness(self, company_id: Any) -> int:
        return self._refresh_completeness(self._require_company(company_id))

    @translate_errors("create company")
    def create_company(self, **fields) -> Any:
        unknown = set(fields) - COMPANY_FIELDS
        if unknown:
            raise ValueError(f"Unknown company fields: {sorted(unknown)}")
        company = Company(**fields)
        self.db.add(company)
        self.db.flush()
        self._refresh_completeness(company)
        return company.id

    @translate_errors("update company")
    def update_company(self, company_id: Any, **fields) -> int:
        unknown = set(fields) - COMPANY_FIELDS
        if unknown:
            raise ValueError(f"Unknown company fields: {sorted(unknown)}")

        company = self._require_company(company_id)
        for name, value in fields.items():
            setattr(company, name, value)
        return self._refresh_completeness(company)
