from __future__ import annotations


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.permission_requests = 0

    def notify(self, identifier: str, title: str, body: str) -> None:
        self.sent.append((identifier, title, body))

    def request_permission(self) -> bool:
        self.permission_requests += 1
        return True
