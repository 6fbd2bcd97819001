from dataclasses import dataclass
from datetime import date

from utils.app_config import AppConfig, save_config
from utils.date_helpers import reminder_month_key, today

BACKUP_MESSAGES = {
    "en": "Monthly Backup Reminder: It is recommended to back up your data. "
          "Run `tally export` to write a backup now.",
    "zh": "每月备份提醒：建议备份你的数据，运行 `tally export` 立即导出。",
}


@dataclass
class Reminder:
    type: str       # 'backup'
    title: str
    key: str        # month key the reminder belongs to, e.g. '2026-10'


class ReminderService:
    """Once-per-month backup reminder. The marker lives in the injected config."""

    def __init__(self, config: AppConfig, persist=save_config):
        self._config = config
        self._persist = persist

    def backup_due(self, ref_date: date | None = None) -> bool:
        ref = ref_date or today()
        return self._config.last_backup_reminder != reminder_month_key(ref)

    def mark_reminded(self, ref_date: date | None = None) -> None:
        ref = ref_date or today()
        self._config.last_backup_reminder = reminder_month_key(ref)
        self._persist(self._config)

    def get_reminders(self, ref_date: date | None = None) -> list[Reminder]:
        """Due reminders for ``ref_date``; each is marked as shown when returned."""
        ref = ref_date or today()
        if not self.backup_due(ref):
            return []
        message = BACKUP_MESSAGES.get(self._config.language, BACKUP_MESSAGES["en"])
        self.mark_reminded(ref)
        return [Reminder(type="backup", title=message, key=reminder_month_key(ref))]
