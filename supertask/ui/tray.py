from __future__ import annotations

import logging

from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from supertask.config import SETTINGS

logger = logging.getLogger(__name__)


class TrayIcon(QSystemTrayIcon):
    """Tray entry of the windowless app; its menu is the only way to quit."""

    def __init__(self, app: QApplication):
        super().__init__(app.style().standardIcon(QStyle.StandardPixmap.SP_DialogApplyButton), app)
        self.setToolTip(SETTINGS.app_name)

        self.menu = QMenu()
        self.quit_action = self.menu.addAction("Quit")
        self.quit_action.triggered.connect(app.quit)
        self.setContextMenu(self.menu)


def create_tray_icon(app: QApplication) -> TrayIcon:
    tray = TrayIcon(app)
    if QSystemTrayIcon.isSystemTrayAvailable():
        tray.show()
    else:
        logger.warning("System tray is not available; running without a tray icon")
    return tray


class TrayNotifier:
    def __init__(self, tray: QSystemTrayIcon, timeout_ms: int = 8000) -> None:
        self._tray = tray
        self._timeout_ms = timeout_ms

    def notify(self, identifier: str, title: str, body: str) -> None:
        if not self._tray.isVisible() or not self._tray.supportsMessages():
            logger.info("Tray cannot show messages; dropping notification %s", identifier)
            return
        self._tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information, self._timeout_ms)

    def request_permission(self) -> bool:
        available = QSystemTrayIcon.isSystemTrayAvailable()
        if not available:
            logger.warning("System tray is not available; notifications will be dropped")
        return available
