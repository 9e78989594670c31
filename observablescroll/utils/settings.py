from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    # Timestamped [TRACE] output for scroll tracking (skipped items, samples).
    'scroll_trace_logs': False,
    # Restore the last saved tracker snapshot when the demo window opens.
    'restore_scroll_state': True,
    'demo_item_count': 200,
    'demo_min_item_height': 24,
    'demo_max_item_height': 160,
    'demo_seed': 7,
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('observablescroll', 'observablescroll')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_trace_enabled() -> bool:
    try:
        return bool(settings.value(
            'scroll_trace_logs',
            defaultValue=DEFAULT_SETTINGS['scroll_trace_logs'],
            type=bool))
    except Exception:
        return DEFAULT_SETTINGS['scroll_trace_logs']
