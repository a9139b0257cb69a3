from __future__ import annotations

import os
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from supertask.infra.db import create_session_factory, init_db
from supertask.infra.repository import KeyValueRepository
from supertask.services.rule_service import RuleService
from supertask.services.task_service import TaskService

from .fakes import FakeNotifier


@pytest.fixture()
def session_factory(tmp_path: Path) -> sessionmaker:
    factory = create_session_factory(f"sqlite:///{tmp_path / 'supertask.sqlite3'}")
    init_db(factory)
    return factory


@pytest.fixture()
def repo(session_factory: sessionmaker) -> KeyValueRepository:
    return KeyValueRepository(session_factory)


@pytest.fixture()
def task_service(repo: KeyValueRepository) -> TaskService:
    return TaskService(repo)


@pytest.fixture()
def rule_service(repo: KeyValueRepository) -> RuleService:
    return RuleService(repo)


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()
