from PySide6.QtCore import Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (QHBoxLayout, QLabel, QMainWindow, QPushButton,
                               QSpinBox, QVBoxLayout, QWidget)

from observablescroll.models.demo_item_model import (DEMO_SETTING_KEYS,
                                                     DemoItemModel,
                                                     heights_from_settings)
from observablescroll.utils.settings import DEFAULT_SETTINGS, settings
from observablescroll.widgets.observable_list_view import ObservableListView
from observablescroll.widgets.scroll_tracker import ScrollState


class MainWindow(QMainWindow):
    """Variable-height list with a live readout of the tracked offset."""

    def __init__(self, app):
        super().__init__()
        self.app = app
        self.setWindowTitle('Observable Scroll')
        self.resize(480, 640)

        self.item_model = DemoItemModel.from_settings(self)
        self.list_view = ObservableListView(self)
        self.list_view.setModel(self.item_model)

        self.status_label = QLabel()
        self.scroll_target_spinbox = QSpinBox()
        self.scroll_target_spinbox.setRange(0, max(0, self.item_model.total_height()))
        self.scroll_target_spinbox.setSingleStep(100)
        scroll_to_button = QPushButton('Scroll To')
        scroll_to_button.clicked.connect(self.scroll_to_target)

        controls = QHBoxLayout()
        controls.addWidget(self.scroll_target_spinbox)
        controls.addWidget(scroll_to_button)
        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)
        layout.addWidget(self.list_view)
        layout.addWidget(self.status_label)
        layout.addLayout(controls)
        self.setCentralWidget(central_widget)

        self._direction = ScrollState.STATIONARY
        self.list_view.scroll_changed.connect(self.update_status)
        self.list_view.up_or_cancel_motion_event.connect(self.on_gesture_released)
        settings.change.connect(self.setting_change)
        self.update_status(0, False, False)
        self.restore_scroll_state()

    @Slot(str, object)
    def setting_change(self, key, value):
        if key in DEMO_SETTING_KEYS:
            self.item_model.set_heights(heights_from_settings())
            self.list_view.reset_scroll_tracking()
            self.scroll_target_spinbox.setRange(0, max(0, self.item_model.total_height()))
            self.update_status(0, False, False)

    def restore_scroll_state(self):
        restore = settings.value(
            'restore_scroll_state',
            defaultValue=DEFAULT_SETTINGS['restore_scroll_state'], type=bool)
        if not restore or not settings.contains('scroll_state'):
            return
        if self.list_view.restore_scroll_state(settings.value('scroll_state', type=bytes)):
            print(f"[STATE] Restored scroll state at y={self.list_view.get_current_scroll_y()}")

    def closeEvent(self, event: QCloseEvent):
        """Save the tracker state before closing."""
        settings.setValue('scroll_state', self.list_view.save_scroll_state())
        super().closeEvent(event)

    @Slot()
    def scroll_to_target(self):
        self.list_view.scroll_vertically_to(self.scroll_target_spinbox.value())

    @Slot(object)
    def on_gesture_released(self, direction):
        self._direction = direction
        self._render_status(self.list_view.get_current_scroll_y(), False, False)

    @Slot(int, bool, bool)
    def update_status(self, scroll_y: int, first_scroll: bool, dragging: bool):
        self._direction = self.list_view.tracker.direction
        self._render_status(scroll_y, first_scroll, dragging)

    def _render_status(self, scroll_y: int, first_scroll: bool, dragging: bool):
        self.status_label.setText(
            f'y={scroll_y}  direction={self._direction.value}'
            f'  dragging={"yes" if dragging else "no"}'
            f'{"  (first)" if first_scroll else ""}')
