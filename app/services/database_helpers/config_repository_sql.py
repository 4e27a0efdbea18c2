# /exam-portal/app/services/database_helpers/config_repository_sql.py

from typing import Dict, Optional
from sqlalchemy.orm import Session

from app.db.models.config_models import ConfigEntry


class ConfigRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get(self, key: str) -> Optional[str]:
        """Returns the stored value for `key`, or None when it was never set."""
        entry = self.db.query(ConfigEntry).filter(ConfigEntry.key == key).first()
        return entry.value if entry else None

    def set(self, key: str, value: str):
        """Inserts or overwrites a single setting."""
        entry = self.db.query(ConfigEntry).filter(ConfigEntry.key == key).first()
        if entry:
            entry.value = value
        else:
            self.db.add(ConfigEntry(key=key, value=value))
        self.db.commit()

    def get_all(self) -> Dict[str, Optional[str]]:
        return {entry.key: entry.value for entry in self.db.query(ConfigEntry).all()}
