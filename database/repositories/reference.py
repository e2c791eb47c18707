from typing import Any, Optional

from database.models import Language, Skill
from database.repositories.base import BaseRepository, translate_errors


class ReferenceRepository(BaseRepository):
    """Skill and language catalogues."""

    @translate_errors("add skill")
    def add_skill(self, name: str, category: Optional[str] = None) -> Any:
        skill = Skill(name=name, category=category)
        self.db.add(skill)
        self.db.flush()
        return skill.id

    @translate_errors("add language")
    def add_language(self, name: str, iso_code: Optional[str] = None) -> Any:
        language = Language(name=name, iso_code=iso_code)
        self.db.add(language)
        self.db.flush()
        return language.id
