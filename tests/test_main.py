from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from supertask import main as entry
from supertask.domain.entities import AutomationRule, Task
from supertask.domain.enums import ActionType, TaskCategory, TriggerType

from .fakes import FakeNotifier


class GuiStarted(Exception):
    pass


class StubApplication:
    def __init__(self, argv) -> None:
        raise GuiStarted


@pytest.fixture()
def services(session_factory: sessionmaker, notifier: FakeNotifier) -> entry.Services:
    return entry.build_services(session_factory, notifier=notifier)


@pytest.fixture()
def offline_main(monkeypatch: pytest.MonkeyPatch, session_factory: sessionmaker) -> None:
    monkeypatch.setattr(entry, "setup_logging", lambda: None)
    monkeypatch.setattr(entry, "init_db", lambda: None)
    original_build_services = entry.build_services
    monkeypatch.setattr(
        entry, "build_services", lambda: original_build_services(session_factory, notifier=FakeNotifier())
    )
    monkeypatch.setattr(entry, "QApplication", StubApplication)


def test_export_writes_full_bundle(services: entry.Services, tmp_path: Path) -> None:
    services.tasks.add_task(Task(title="Pay rent", category=TaskCategory.FINANCE))

    target = entry.export_to(services, str(tmp_path / "nested" / "out.json"))

    bundle = json.loads(target.read_text(encoding="utf-8"))
    assert set(bundle) == {"profile", "tasks", "templates", "rules", "exportDate"}
    assert [t["title"] for t in bundle["tasks"]] == ["Pay rent"]
    assert len(bundle["templates"]) == 3
    assert len(bundle["rules"]) == 2


def test_built_evaluator_listens_to_task_changes(services: entry.Services, notifier: FakeNotifier) -> None:
    for rule in services.rules.rules:
        services.rules.delete_rule(rule)
    services.rules.add_rule(
        AutomationRule(
            name="Work reminder",
            trigger_type=TriggerType.CATEGORY_BASED,
            action_type=ActionType.SEND_NOTIFICATION,
            conditions={"category": "Work", "notificationTitle": "Work waiting"},
        )
    )

    services.tasks.add_task(Task(title="Slides", category=TaskCategory.WORK))

    assert [n[1] for n in notifier.sent] == ["Work waiting"]


def test_export_flag_without_path_uses_configured_target(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(entry, "SETTINGS", replace(entry.SETTINGS, export_path="/tmp/backup.json"))

    assert entry._parse_args([]).export is None
    assert entry._parse_args(["--export"]).export == "/tmp/backup.json"
    assert entry._parse_args(["--export", "out.json"]).export == "out.json"


def test_export_flag_falls_back_to_default_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(entry, "SETTINGS", replace(entry.SETTINGS, export_path=None))

    assert entry._parse_args(["--export"]).export == entry.DEFAULT_EXPORT_FILE


def test_main_export_mode_writes_file_and_skips_gui(offline_main: None, tmp_path: Path) -> None:
    target = tmp_path / "export.json"

    entry.main(["--export", str(target)])

    assert json.loads(target.read_text(encoding="utf-8"))["tasks"] == []


def test_configured_export_path_does_not_hijack_plain_launch(
    offline_main: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    target = tmp_path / "configured.json"
    monkeypatch.setattr(entry, "SETTINGS", replace(entry.SETTINGS, export_path=str(target)))

    with pytest.raises(GuiStarted):
        entry.main([])

    assert not target.exists()
