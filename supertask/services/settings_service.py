from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime

from supertask.domain.entities import ProductivityStats, UserProfile
from supertask.domain.enums import TaskCategory, TaskPriority
from supertask.infra.repository import ONBOARDING_KEY, PROFILE_KEY, KeyValueRepository
from supertask.infra.serializers import (
    DECODE_ERRORS,
    profile_from_dict,
    profile_to_dict,
    rule_to_dict,
    task_to_dict,
    template_to_dict,
)

from .notifications import NotificationDispatcher
from .rule_service import RuleService
from .stats_service import calculate_stats
from .task_service import TaskService

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(
        self,
        repo: KeyValueRepository,
        task_service: TaskService,
        rule_service: RuleService,
        notifier: NotificationDispatcher,
    ) -> None:
        self._repo = repo
        self._tasks = task_service
        self._rules = rule_service
        self._notifier = notifier
        self.profile = self.load_profile()

    def load_profile(self) -> UserProfile:
        document = self._repo.load_json(PROFILE_KEY)
        if document is None:
            return UserProfile()
        try:
            return profile_from_dict(document)
        except DECODE_ERRORS:
            logger.warning("Could not decode %s; using a fresh profile", PROFILE_KEY)
            return UserProfile()

    def save_profile(self, profile: UserProfile | None = None) -> UserProfile:
        if profile is not None:
            self.profile = profile
        self._repo.save_json(PROFILE_KEY, profile_to_dict(self.profile))
        return self.profile

    def update_username(self, username: str) -> UserProfile:
        return self.save_profile(replace(self.profile, username=username))

    def update_email(self, email: str) -> UserProfile:
        return self.save_profile(replace(self.profile, email=email))

    def update_preferences(self, **changes) -> UserProfile:
        preferences = replace(self.profile.preferences, **changes)
        return self.save_profile(replace(self.profile, preferences=preferences))

    def has_completed_onboarding(self) -> bool:
        return bool(self._repo.load_json(ONBOARDING_KEY))

    def complete_onboarding(
        self,
        username: str,
        default_category: TaskCategory = TaskCategory.PERSONAL,
        default_priority: TaskPriority = TaskPriority.MEDIUM,
        notifications_enabled: bool = True,
    ) -> UserProfile:
        username = username.strip()
        if not username:
            raise ValueError("username is required")
        base = UserProfile()
        profile = replace(
            base,
            username=username,
            preferences=replace(
                base.preferences,
                default_task_category=default_category,
                default_task_priority=default_priority,
                notifications_enabled=notifications_enabled,
            ),
        )
        self.save_profile(profile)
        self._repo.save_json(ONBOARDING_KEY, True)
        if notifications_enabled:
            self._notifier.request_permission()
        logger.info("Onboarding completed for %s", username)
        return profile

    def get_statistics(self, now: datetime | None = None) -> ProductivityStats:
        return calculate_stats(self._tasks.tasks, now)

    def update_statistics(self, now: datetime | None = None) -> ProductivityStats:
        stats = self.get_statistics(now)
        self.save_profile(replace(self.profile, stats=stats))
        return stats

    def export_data(self, now: datetime | None = None) -> str:
        bundle = {
            "profile": profile_to_dict(self.profile),
            "tasks": [task_to_dict(t) for t in self._tasks.tasks],
            "templates": [template_to_dict(t) for t in self._tasks.templates],
            "rules": [rule_to_dict(r) for r in self._rules.rules],
            "exportDate": (now or datetime.now()).isoformat(),
        }
        return json.dumps(bundle, ensure_ascii=False, indent=2)

    def reset_app(self) -> None:
        self._repo.clear()
        self.profile = UserProfile()
        logger.info("All stored data cleared")
