"""Main application window for TilawaFlow.

This module defines the :class:`MainWindow` class which ties together
the surah and reciter selectors, the ayah display and the transport
controls.  The window holds no playback logic of its own: every
control calls an operation of
:class:`~tilawaflow.core.session.RecitationSession`, and the window
redraws itself from the session's observables whenever the session
notifies a change.

Layout, top to bottom:

* selection row – searchable surah and reciter combo boxes
* chapter header – English and Arabic names, revelation type, ayah count
* ayah display – Arabic text and translation, with adjustable font sizes
* seek slider with ``mm:ss`` labels
* transport row – previous surah/ayah, play/pause, next ayah/surah,
  mute and volume, continuous play
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QActionGroup, QFont, QKeySequence
from PyQt6.QtWidgets import (
    QAbstractSlider,
    QCheckBox,
    QComboBox,
    QCompleter,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..config import AppConfig, get_app_config
from ..connectors import get_default_connector
from ..core.session import CATALOGUE, PROGRESS, RecitationSession
from ..utils.timefmt import format_clock

logger = logging.getLogger(__name__)

# One font-size unit in points; sizes in the config are relative.
_POINTS_PER_UNIT = 12.0


class MainWindow(QMainWindow):
    """Main window for the TilawaFlow recitation player.

    :param session: The session to drive.  When omitted, one is built
        from *config* with a Qt audio resource, the configured connector
        and a thread pool dispatcher.
    :param config: Application configuration; loaded when omitted.
    """

    def __init__(self, session: Optional[RecitationSession] = None,
                 config: Optional[AppConfig] = None) -> None:
        super().__init__()
        self._config = config or get_app_config()
        if session is None:
            session = self._build_session()
        self.session = session
        display = self._config.section("display")
        self.font_step = float(display.get("font_step", 0.125))
        self.arabic_bounds = (float(display.get("arabic_font_min", 1.5)),
                              float(display.get("arabic_font_max", 4.0)))
        self.translation_bounds = (float(display.get("translation_font_min", 0.875)),
                                   float(display.get("translation_font_max", 2.0)))
        self.arabic_font_size = float(display.get("arabic_font_size", 2.25))
        self.translation_font_size = float(display.get("translation_font_size", 1.125))
        self._seek_dragging = False
        self.init_ui()
        self._unsubscribe = self.session.subscribe(self._on_session_changed)
        self._populate_catalogue()
        self.refresh()

    def _build_session(self) -> RecitationSession:
        # Imported here so tests can build the window around a fake resource.
        from ..audio.qt_resource import QtAudioResource
        from .async_job import JobDispatcher

        connector = get_default_connector(self._config.section("connector"))
        resource = QtAudioResource(self)
        return RecitationSession.from_config(
            self._config, connector, resource, dispatch=JobDispatcher(parent=self)
        )

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def init_ui(self) -> None:
        """Set up the window title and child widgets."""
        self.setWindowTitle("TilawaFlow – Quran Recitation Player")
        self.setGeometry(100, 100, 900, 640)
        self.create_menu_bar()
        self.create_central_widget()
        self.statusBar().showMessage("Ready")

    def create_menu_bar(self) -> None:
        menubar = self.menuBar()

        # FILE ──────────────────────────────────────────────────────────
        file_menu = menubar.addMenu("&File")
        reload_action = QAction("&Reload", self)
        reload_action.setShortcut("Ctrl+R")
        reload_action.triggered.connect(self.session.reload)
        file_menu.addAction(reload_action)
        file_menu.addSeparator()
        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # PLAY ─────────────────────────────────────────────────────────
        play_menu = menubar.addMenu("&Play")
        for text, shortcut, slot in (
            ("&Play / Pause", "Space", self.session.toggle_play),
            ("&Next Ayah", "Right", self.session.advance),
            ("P&revious Ayah", "Left", self.session.retreat),
            ("Next &Surah", "Ctrl+Right", self.session.next_chapter),
            ("Previous S&urah", "Ctrl+Left", self.session.previous_chapter),
            ("&Mute", "M", self.session.toggle_mute),
        ):
            action = QAction(text, self)
            action.setShortcut(QKeySequence(shortcut))
            action.triggered.connect(slot)
            play_menu.addAction(action)
        play_menu.addSeparator()
        self.continuous_action = QAction("&Continuous Play", self)
        self.continuous_action.setCheckable(True)
        self.continuous_action.toggled.connect(self.session.set_continuous)
        play_menu.addAction(self.continuous_action)

        # VIEW ──────────────────────────────────────────────────────────
        view_menu = menubar.addMenu("&View")
        for text, kind, sign in (
            ("Larger Arabic Text", "arabic", 1),
            ("Smaller Arabic Text", "arabic", -1),
            ("Larger Translation", "translation", 1),
            ("Smaller Translation", "translation", -1),
        ):
            action = QAction(text, self)
            action.triggered.connect(lambda checked, k=kind, s=sign: self.change_font_size(k, s))
            view_menu.addAction(action)
        view_menu.addSeparator()
        self.translation_menu = view_menu.addMenu("Translation")
        self._translation_group = QActionGroup(self)
        self._translation_group.setExclusive(True)

        # HELP ──────────────────────────────────────────────────────────
        help_menu = menubar.addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def create_central_widget(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)

        # Selection row
        selection = QHBoxLayout()
        self.chapter_combo = self._searchable_combo("Select Surah")
        self.chapter_combo.activated.connect(self._on_chapter_activated)
        self.edition_combo = self._searchable_combo("Select Reciter")
        self.edition_combo.activated.connect(self._on_edition_activated)
        selection.addWidget(self.chapter_combo, 2)
        selection.addWidget(self.edition_combo, 2)
        layout.addLayout(selection)

        # Chapter header
        self.chapter_title = QLabel()
        self.chapter_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title_font = QFont()
        title_font.setPointSize(18)
        title_font.setBold(True)
        self.chapter_title.setFont(title_font)
        self.chapter_details = QLabel()
        self.chapter_details.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.chapter_title)
        layout.addWidget(self.chapter_details)

        # Ayah display
        self.ayah_number_label = QLabel()
        self.ayah_number_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.arabic_label = QLabel()
        self.arabic_label.setWordWrap(True)
        self.arabic_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.arabic_label.setLayoutDirection(Qt.LayoutDirection.RightToLeft)
        self.translation_label = QLabel()
        self.translation_label.setWordWrap(True)
        self.translation_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setStyleSheet("color: #b91c1c;")
        layout.addWidget(self.ayah_number_label)
        layout.addWidget(self.arabic_label, 3)
        layout.addWidget(self.translation_label, 2)
        layout.addWidget(self.error_label)
        self._apply_fonts()

        # Seek row
        seek_row = QHBoxLayout()
        self.position_label = QLabel("00:00")
        self.duration_label = QLabel("00:00")
        self.seek_slider = QSlider(Qt.Orientation.Horizontal)
        self.seek_slider.setRange(0, 0)
        self.seek_slider.setSingleStep(1000)
        self.seek_slider.setPageStep(5000)
        self.seek_slider.sliderPressed.connect(self._on_seek_pressed)
        self.seek_slider.sliderReleased.connect(self._on_seek_released)
        self.seek_slider.actionTriggered.connect(self._on_seek_action)
        seek_row.addWidget(self.position_label)
        seek_row.addWidget(self.seek_slider, 1)
        seek_row.addWidget(self.duration_label)
        layout.addLayout(seek_row)

        # Transport row
        transport = QHBoxLayout()
        self.prev_chapter_btn = QPushButton("⏮")
        self.prev_chapter_btn.setToolTip("Previous Surah")
        self.prev_chapter_btn.clicked.connect(self.session.previous_chapter)
        self.prev_ayah_btn = QPushButton("◀")
        self.prev_ayah_btn.setToolTip("Previous Ayah")
        self.prev_ayah_btn.clicked.connect(self.session.retreat)
        self.play_btn = QPushButton("Play")
        self.play_btn.clicked.connect(self.session.toggle_play)
        self.next_ayah_btn = QPushButton("▶")
        self.next_ayah_btn.setToolTip("Next Ayah")
        self.next_ayah_btn.clicked.connect(self.session.advance)
        self.next_chapter_btn = QPushButton("⏭")
        self.next_chapter_btn.setToolTip("Next Surah")
        self.next_chapter_btn.clicked.connect(self.session.next_chapter)
        for btn in (self.prev_chapter_btn, self.prev_ayah_btn, self.play_btn,
                    self.next_ayah_btn, self.next_chapter_btn):
            transport.addWidget(btn)
        transport.addStretch(1)
        self.mute_btn = QPushButton("Mute")
        self.mute_btn.clicked.connect(self.session.toggle_mute)
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setMaximumWidth(140)
        self.volume_slider.valueChanged.connect(self._on_volume_slider)
        self.continuous_check = QCheckBox("Continuous")
        self.continuous_check.toggled.connect(self.session.set_continuous)
        transport.addWidget(self.mute_btn)
        transport.addWidget(self.volume_slider)
        transport.addWidget(self.continuous_check)
        layout.addLayout(transport)

        self.setCentralWidget(central)

    def _searchable_combo(self, placeholder: str) -> QComboBox:
        combo = QComboBox()
        combo.setEditable(True)
        combo.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        combo.lineEdit().setPlaceholderText(placeholder)
        completer = combo.completer()
        completer.setCompletionMode(QCompleter.CompletionMode.PopupCompletion)
        completer.setFilterMode(Qt.MatchFlag.MatchContains)
        completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        return combo

    # ------------------------------------------------------------------
    # Session → widgets
    # ------------------------------------------------------------------

    def _on_session_changed(self, topic: str) -> None:
        if topic == PROGRESS:
            self._refresh_progress()
        elif topic == CATALOGUE:
            self._populate_catalogue()
            self.refresh()
        else:
            self.refresh()

    def _populate_catalogue(self) -> None:
        session = self.session
        self.chapter_combo.blockSignals(True)
        self.chapter_combo.clear()
        for chapter in session.chapters:
            self.chapter_combo.addItem(chapter.label, chapter.number)
        self.chapter_combo.blockSignals(False)

        self.edition_combo.blockSignals(True)
        self.edition_combo.clear()
        for edition in session.editions:
            self.edition_combo.addItem(edition.label, edition.identifier)
        self.edition_combo.blockSignals(False)

        for action in self._translation_group.actions():
            self._translation_group.removeAction(action)
        self.translation_menu.clear()
        for edition in session.translations:
            action = QAction(edition.label, self)
            action.setCheckable(True)
            action.setData(edition.identifier)
            action.triggered.connect(
                lambda checked, ident=edition.identifier: self.session.select_translation(ident)
            )
            self._translation_group.addAction(action)
            self.translation_menu.addAction(action)

    def refresh(self) -> None:
        """Redraw every widget from the session's observables."""
        session = self.session
        cursor = session.cursor

        self._select_data(self.chapter_combo, cursor.chapter)
        self._select_data(self.edition_combo, session.edition)
        for action in self._translation_group.actions():
            action.setChecked(action.data() == session.translation)

        chapter = session.current_chapter
        if chapter is not None:
            self.chapter_title.setText(f"{chapter.english_name}  {chapter.name}")
            self.chapter_details.setText(
                f"{chapter.english_name_translation} · {chapter.revelation_type} · "
                f"{chapter.ayah_count} Ayahs"
            )
        else:
            self.chapter_title.setText(f"Surah {cursor.chapter}")
            self.chapter_details.setText("")

        ayah = session.current_ayah
        bundle = session.bundle
        if ayah is not None and bundle is not None:
            self.ayah_number_label.setText(f"Ayah {ayah.number_in_surah} of {len(bundle)}")
            self.arabic_label.setText(ayah.text)
            self.translation_label.setText(f"“{ayah.translation}”")
        else:
            self.ayah_number_label.setText("Loading…" if session.is_loading else "")
            self.arabic_label.setText("")
            self.translation_label.setText("")
        self.error_label.setText(session.error or "")
        self.error_label.setVisible(bool(session.error))

        self.play_btn.setText("Pause" if session.is_playing else "Play")
        self.prev_ayah_btn.setEnabled(not session.is_first)
        self.next_ayah_btn.setEnabled(not session.is_last and bundle is not None)
        self.prev_chapter_btn.setEnabled(not session.is_first_chapter)
        self.next_chapter_btn.setEnabled(not session.is_last_chapter)

        self.volume_slider.blockSignals(True)
        self.volume_slider.setValue(0 if session.muted else int(round(session.volume * 100)))
        self.volume_slider.blockSignals(False)
        self.mute_btn.setText("Unmute" if session.muted else "Mute")
        for widget in (self.continuous_check, self.continuous_action):
            widget.blockSignals(True)
            widget.setChecked(session.continuous)
            widget.blockSignals(False)

        self._refresh_progress()
        self._refresh_status()

    def _refresh_progress(self) -> None:
        session = self.session
        duration_ms = int(session.duration * 1000)
        self.seek_slider.setEnabled(duration_ms > 0)
        if not self._seek_dragging:
            self.seek_slider.blockSignals(True)
            self.seek_slider.setRange(0, max(0, duration_ms))
            self.seek_slider.setValue(int(session.position * 1000))
            self.seek_slider.blockSignals(False)
        self.position_label.setText(format_clock(session.position))
        self.duration_label.setText(format_clock(session.duration))

    def _refresh_status(self) -> None:
        session = self.session
        if session.error:
            self.statusBar().showMessage(f"Error: {session.error}")
        elif session.is_loading:
            self.statusBar().showMessage(f"Loading surah {session.cursor.chapter}…")
        elif session.warning:
            self.statusBar().showMessage(f"Playback stopped: {session.warning}")
        else:
            self.statusBar().showMessage("Playing" if session.is_playing else "Ready")

    @staticmethod
    def _select_data(combo: QComboBox, value) -> None:
        index = combo.findData(value)
        if index >= 0 and index != combo.currentIndex():
            combo.blockSignals(True)
            combo.setCurrentIndex(index)
            combo.blockSignals(False)

    # ------------------------------------------------------------------
    # Widgets → session
    # ------------------------------------------------------------------

    def _on_chapter_activated(self, index: int) -> None:
        number = self.chapter_combo.itemData(index)
        if number is not None:
            self.session.select_chapter(int(number))

    def _on_edition_activated(self, index: int) -> None:
        identifier = self.edition_combo.itemData(index)
        if identifier:
            self.session.select_edition(str(identifier))

    def _on_volume_slider(self, value: int) -> None:
        self.session.set_volume(value / 100.0)

    def _on_seek_pressed(self) -> None:
        self._seek_dragging = True

    def _on_seek_released(self) -> None:
        self._seek_dragging = False
        self.session.seek(self.seek_slider.value() / 1000.0)
        self._refresh_progress()

    def _on_seek_action(self, action: int) -> None:
        # Groove clicks and keys; drags are applied on release.
        if self._seek_dragging or action == QAbstractSlider.SliderAction.SliderMove.value:
            return
        # sliderPosition already holds the target, value() does not yet.
        self.session.seek(self.seek_slider.sliderPosition() / 1000.0)

    def change_font_size(self, kind: str, sign: int) -> None:
        """Step the Arabic or translation font size within its bounds."""
        if kind == "arabic":
            low, high = self.arabic_bounds
            self.arabic_font_size = max(low, min(high, self.arabic_font_size + sign * self.font_step))
        else:
            low, high = self.translation_bounds
            self.translation_font_size = max(
                low, min(high, self.translation_font_size + sign * self.font_step)
            )
        self._apply_fonts()

    def _apply_fonts(self) -> None:
        arabic = QFont()
        arabic.setPointSizeF(self.arabic_font_size * _POINTS_PER_UNIT)
        self.arabic_label.setFont(arabic)
        translation = QFont()
        translation.setPointSizeF(self.translation_font_size * _POINTS_PER_UNIT)
        translation.setItalic(True)
        self.translation_label.setFont(translation)

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About TilawaFlow",
            "TilawaFlow – ayah-by-ayah Quran recitation player.\n"
            "Text, translations and recitations from api.alquran.cloud.",
        )

    def closeEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        self._unsubscribe()
        self.session.controller.release()
        super().closeEvent(event)
