from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from .db import SessionLocal
from .models import KeyValueModel

logger = logging.getLogger(__name__)

TASKS_KEY = "saved_tasks"
TEMPLATES_KEY = "saved_templates"
RULES_KEY = "automation_rules"
PROFILE_KEY = "user_profile"
ONBOARDING_KEY = "hasCompletedOnboarding"


class KeyValueRepository:
    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self._session_factory() as session:
            row = session.get(KeyValueModel, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            row = session.get(KeyValueModel, key)
            if row is None:
                session.add(KeyValueModel(key=key, value=value))
            else:
                row.value = value
            session.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as session:
            session.execute(delete(KeyValueModel).where(KeyValueModel.key == key))
            session.commit()

    def keys(self) -> list[str]:
        with self._session_factory() as session:
            return list(session.scalars(select(KeyValueModel.key).order_by(KeyValueModel.key)))

    def clear(self) -> None:
        with self._session_factory() as session:
            session.execute(delete(KeyValueModel))
            session.commit()

    def load_json(self, key: str) -> Any | None:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Stored value for %s is not valid JSON; ignoring it", key)
            return None

    def save_json(self, key: str, document: Any) -> None:
        self.set(key, json.dumps(document, ensure_ascii=False))
