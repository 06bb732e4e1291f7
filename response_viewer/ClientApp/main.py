"""Response viewer window implemented with PySide6."""
from __future__ import annotations

import logging
import sys
from typing import Dict, List, Optional

from PySide6 import QtCore, QtWidgets

from response_viewer.controller import (
    Advance,
    Intent,
    Noop,
    Retreat,
    SetCode,
    SetCodeText,
    SetMatches,
    decode_key,
)
from response_viewer.session import Session
from response_viewer.shared.models import CodesKind
from response_viewer.shared.theme import apply_solarized_palette
from response_viewer.store import PersistError
from response_viewer.view import EntryView, render

LOG = logging.getLogger(__name__)

KEY_NAMES: Dict[int, str] = {
    int(QtCore.Qt.Key.Key_Right): "right",
    int(QtCore.Qt.Key.Key_Left): "left",
    int(QtCore.Qt.Key.Key_Space): "space",
}


def key_name(key: int) -> str:
    return KEY_NAMES.get(int(key), "")


def _is_text_input(widget: Optional[QtWidgets.QWidget]) -> bool:
    if isinstance(widget, QtWidgets.QLineEdit):
        return not widget.isReadOnly()
    if isinstance(widget, (QtWidgets.QTextEdit, QtWidgets.QPlainTextEdit)):
        return not widget.isReadOnly()
    return False


class CodesPanel(QtWidgets.QWidget):
    """Theme columns of tag checkboxes, or a single free-text field."""

    def __init__(self, viewer: "ViewerWindow", view: EntryView) -> None:
        super().__init__()
        self.viewer = viewer
        self.kind = view.kind
        self.checkboxes: Dict[str, List[QtWidgets.QCheckBox]] = {}
        self.text_edit: Optional[QtWidgets.QLineEdit] = None
        if view.kind is CodesKind.TAGS:
            self._build_grid(view)
        else:
            self._build_text()

    def _build_grid(self, view: EntryView) -> None:
        grid = QtWidgets.QGridLayout(self)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setHorizontalSpacing(10)
        for row_idx, row in enumerate(view.code_rows):
            for col_idx, column in enumerate(row):
                theme_widget = QtWidgets.QWidget()
                theme_layout = QtWidgets.QVBoxLayout(theme_widget)
                theme_layout.setContentsMargins(10, 10, 10, 10)
                title = QtWidgets.QLabel(column.theme)
                title.setObjectName("themeTitle")
                theme_layout.addWidget(title)
                for option in column.options:
                    checkbox = QtWidgets.QCheckBox(option.label)
                    checkbox.setProperty("tag", option.tag)
                    checkbox.clicked.connect(
                        lambda checked, tag=option.tag: self.viewer.dispatch(SetCode(tag, bool(checked)))
                    )
                    self.checkboxes.setdefault(option.tag, []).append(checkbox)
                    theme_layout.addWidget(checkbox)
                theme_layout.addStretch()
                grid.addWidget(theme_widget, row_idx, col_idx, QtCore.Qt.AlignmentFlag.AlignTop)

    def _build_text(self) -> None:
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(10, 0, 10, 0)
        layout.addWidget(QtWidgets.QLabel("Codes:"))
        self.text_edit = QtWidgets.QLineEdit()
        self.text_edit.setPlaceholderText("Codes for this response")
        self.text_edit.textEdited.connect(lambda text: self.viewer.dispatch(SetCodeText(text)))
        layout.addWidget(self.text_edit, 1)

    def apply(self, view: EntryView) -> None:
        if self.text_edit is not None:
            if self.text_edit.text() != view.code_text:
                self.text_edit.setText(view.code_text)
            return
        checked = {option.tag: option.checked for row in view.code_rows for column in row for option in column.options}
        for tag, boxes in self.checkboxes.items():
            for box in boxes:
                box.setChecked(checked.get(tag, False))


class ViewerWindow(QtWidgets.QMainWindow):
    def __init__(self, session: Session, show_dialogs: bool = True) -> None:
        super().__init__()
        self.session = session
        self.controller = session.controller
        self.show_dialogs = show_dialogs
        self.fatal_error: Optional[PersistError] = None
        self.resize(1100, 800)
        self._setup_ui()
        self.refresh()
        app = QtWidgets.QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    def _setup_ui(self) -> None:
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)

        self.header_label = QtWidgets.QLabel()
        self.header_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.header_label)

        ratings_widget = QtWidgets.QWidget()
        self.ratings_layout = QtWidgets.QVBoxLayout(ratings_widget)
        self.ratings_layout.setContentsMargins(10, 10, 10, 10)
        layout.addWidget(ratings_widget)

        self.matches_box = QtWidgets.QCheckBox("Matches")
        self.matches_box.clicked.connect(lambda checked: self.dispatch(SetMatches(bool(checked))))
        layout.addWidget(self.matches_box)

        self.codes_panel = CodesPanel(self, self._render())
        layout.addWidget(self.codes_panel)

        self.response_view = QtWidgets.QPlainTextEdit()
        self.response_view.setReadOnly(True)
        layout.addWidget(self.response_view, 1)

        footer = QtWidgets.QHBoxLayout()
        self.prev_button = QtWidgets.QPushButton("Prev")
        self.prev_button.clicked.connect(lambda: self.dispatch(Retreat()))
        self.next_button = QtWidgets.QPushButton("Next")
        self.next_button.clicked.connect(lambda: self.dispatch(Advance()))
        footer.addWidget(self.prev_button)
        footer.addWidget(self.next_button)
        footer.addStretch()
        self.position_label = QtWidgets.QLabel()
        footer.addWidget(self.position_label)
        layout.addLayout(footer)

        self.setCentralWidget(central)

    def _render(self) -> EntryView:
        return render(
            self.controller.state,
            self.session.vocabulary,
            themes_per_row=self.session.config.themes_per_row,
        )

    def refresh(self) -> None:
        view = self._render()
        self.setWindowTitle(view.window_title)
        self.header_label.setText(view.header)
        while self.ratings_layout.count():
            item = self.ratings_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()
        for rating in view.ratings:
            label = QtWidgets.QLabel(rating)
            label.setWordWrap(True)
            self.ratings_layout.addWidget(label)
        self.matches_box.setChecked(view.matches_checked)
        self.codes_panel.apply(view)
        if self.response_view.toPlainText() != view.response:
            self.response_view.setPlainText(view.response)
        self.position_label.setText(view.position)

    def dispatch(self, intent: Intent) -> None:
        if isinstance(intent, Noop) or self.fatal_error is not None:
            return
        try:
            self.controller.dispatch(intent)
        except PersistError as exc:
            self._fail(exc)
            return
        self.refresh()

    def _fail(self, exc: PersistError) -> None:
        self.fatal_error = exc
        LOG.error("Saving entries failed: %s", exc)
        if self.show_dialogs:
            QtWidgets.QMessageBox.critical(self, "Save entries", f"Failed to save entries: {exc}")
        app = QtWidgets.QApplication.instance()
        if app is not None:
            app.exit(1)

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        if event.type() != QtCore.QEvent.Type.KeyPress or QtWidgets.QApplication.activeModalWidget() is not None:
            return super().eventFilter(obj, event)
        if _is_text_input(QtWidgets.QApplication.focusWidget()):
            return super().eventFilter(obj, event)
        intent = decode_key(key_name(event.key()))  # type: ignore[attr-defined]
        if isinstance(intent, Noop):
            return super().eventFilter(obj, event)
        self.dispatch(intent)
        return True

    def closeEvent(self, event) -> None:  # type: ignore[override]
        app = QtWidgets.QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        super().closeEvent(event)


def run(session: Session) -> int:
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    apply_solarized_palette(app, font_size=session.config.font_size)
    window = ViewerWindow(session)
    window.show()
    status = app.exec()
    if window.fatal_error is not None:
        return 1
    return int(status)
