from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from supertask.domain import rules as params
from supertask.domain.entities import AutomationRule
from supertask.domain.enums import ActionType, TaskCategory, TriggerType
from supertask.infra.repository import RULES_KEY, KeyValueRepository
from supertask.infra.serializers import DECODE_ERRORS, rule_from_dict, rule_to_dict

from .observable import Observable

logger = logging.getLogger(__name__)

RuleSnapshot = tuple[AutomationRule, ...]


class RuleService:
    def __init__(self, repo: KeyValueRepository) -> None:
        self._repo = repo
        self._rules: RuleSnapshot = ()
        self._changes: Observable[RuleSnapshot] = Observable()
        self._load_rules()

    @property
    def rules(self) -> RuleSnapshot:
        return self._rules

    def subscribe(self, listener: Callable[[RuleSnapshot], None]) -> Callable[[], None]:
        return self._changes.subscribe(listener)

    def active_rules(self) -> list[AutomationRule]:
        return [r for r in self._rules if r.is_active]

    def inactive_rules(self) -> list[AutomationRule]:
        return [r for r in self._rules if not r.is_active]

    def get_rule(self, rule_id) -> AutomationRule | None:
        return next((r for r in self._rules if r.id == rule_id), None)

    def add_rule(self, rule: AutomationRule) -> AutomationRule:
        self._set_rules(self._rules + (rule,))
        logger.info("Added automation rule %r (%s -> %s)", rule.name, rule.trigger_type, rule.action_type)
        return rule

    def update_rule(self, rule: AutomationRule) -> AutomationRule | None:
        if self.get_rule(rule.id) is None:
            return None
        self._set_rules(tuple(rule if r.id == rule.id else r for r in self._rules))
        return rule

    def delete_rule(self, rule: AutomationRule) -> None:
        self._set_rules(tuple(r for r in self._rules if r.id != rule.id))

    def toggle_rule_active(self, rule: AutomationRule) -> AutomationRule | None:
        current = self.get_rule(rule.id)
        if current is None:
            return None
        toggled = replace(current, is_active=not current.is_active)
        self._set_rules(tuple(toggled if r.id == rule.id else r for r in self._rules))
        return toggled

    def create_daily_reminder_rule(self, time: str, title: str, message: str) -> AutomationRule:
        return self.add_rule(
            AutomationRule(
                name=f"Daily Reminder: {title}",
                trigger_type=TriggerType.TIME_OF_DAY,
                action_type=ActionType.SEND_NOTIFICATION,
                conditions={
                    params.TIME: time,
                    params.NOTIFICATION_TITLE: title,
                    params.NOTIFICATION_BODY: message,
                },
            )
        )

    def create_weekly_task_rule(
        self, day: int, task_title: str, task_description: str, category: TaskCategory
    ) -> AutomationRule:
        return self.add_rule(
            AutomationRule(
                name=f"Weekly Task: {task_title}",
                trigger_type=TriggerType.DAY_OF_WEEK,
                action_type=ActionType.CREATE_TASK,
                conditions={
                    params.DAY: str(day),
                    params.TASK_TITLE: task_title,
                    params.TASK_DESCRIPTION: task_description,
                    params.CATEGORY: category.value,
                },
            )
        )

    def create_completion_reward_rule(self, title: str, message: str) -> AutomationRule:
        return self.add_rule(
            AutomationRule(
                name="Completion Reward",
                trigger_type=TriggerType.TASK_COMPLETION,
                action_type=ActionType.SEND_NOTIFICATION,
                conditions={
                    params.NOTIFICATION_TITLE: title,
                    params.NOTIFICATION_BODY: message,
                },
            )
        )

    def _set_rules(self, rules: RuleSnapshot) -> None:
        self._rules = rules
        self._save_rules()
        self._changes.publish(self._rules)

    def _save_rules(self) -> None:
        self._repo.save_json(RULES_KEY, [rule_to_dict(r) for r in self._rules])

    def _load_rules(self) -> None:
        document = self._repo.load_json(RULES_KEY)
        if document is not None:
            try:
                self._rules = tuple(rule_from_dict(item) for item in document)
                return
            except DECODE_ERRORS:
                logger.warning("Could not decode %s; restoring default rules", RULES_KEY)
        self._rules = default_rules()
        self._save_rules()
        logger.info("Seeded %s default automation rules", len(self._rules))


def default_rules() -> RuleSnapshot:
    return (
        AutomationRule(
            name="Morning Tasks Creator",
            trigger_type=TriggerType.TIME_OF_DAY,
            action_type=ActionType.SEND_NOTIFICATION,
            conditions={
                params.TIME: "09:00",
                params.NOTIFICATION_TITLE: "Good Morning!",
                params.NOTIFICATION_BODY: "Time to review your tasks for today",
            },
        ),
        AutomationRule(
            name="Task Completion Congratulations",
            trigger_type=TriggerType.TASK_COMPLETION,
            action_type=ActionType.SEND_NOTIFICATION,
            conditions={
                params.NOTIFICATION_TITLE: "Great Job!",
                params.NOTIFICATION_BODY: "You've completed a task. Keep up the good work!",
            },
        ),
    )
