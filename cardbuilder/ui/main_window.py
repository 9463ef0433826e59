"""Editor window: form controls on the left, live card preview on the right."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from PyQt6 import QtCore, QtGui, QtWidgets
from PyQt6.QtWebEngineCore import QWebEnginePage, QWebEngineScript
from PyQt6.QtWebEngineWidgets import QWebEngineView

from ..core import bridge, canvas, storage
from ..core.chat import build_chat
from ..core.i18n import next_language
from ..core.models import ChatNowConfig, TemplateConfig
from ..core.notification import build_notification
from ..core.positions import PositionsFormatError, apply_position_message
from ..core.presets import (
    CHAT_LANGUAGES,
    COMPONENT_LIBRARY,
    apply_chat_language,
    find_component,
    notification_preset,
    notification_preset_names,
)
from ..core.validation import validate_chat_config, validate_template_config
from ..settings import SettingsManager

log = logging.getLogger(__name__)

APP_TITLE = "Card Template Builder"
MODES = ("notification", "chat")


class PreviewPage(QWebEnginePage):
    """Routes the preview shim's console lines to the window."""

    bridgeEvent = QtCore.pyqtSignal(dict)

    def javaScriptConsoleMessage(self, level, message, line, source):  # noqa: N802 (Qt override)
        event = bridge.parse_console_message(message)
        if event is not None:
            self.bridgeEvent.emit(event)
            return
        log.debug("preview console: %s", message)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: Optional[SettingsManager] = None) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1240, 800)

        self.settings = settings or SettingsManager()
        mode = self.settings.get("mode", "notification")
        self.mode = mode if mode in MODES else "notification"
        self.notification = self._load_preset(self.settings.get("notification_preset", "default"))
        self.chat = self._load_chat_language(self.settings.get("chat_lang", "en"))
        self._loading = False

        self._debounce = QtCore.QTimer(self)
        self._debounce.setInterval(400)
        self._debounce.setSingleShot(True)
        self._debounce.timeout.connect(self.update_preview)

        self._build_ui()
        self._build_menu()
        self._bind_events()

        self._sync_controls()
        self.update_preview()

    # ------------------------------------------------------------------ UI --
    def _build_ui(self) -> None:
        splitter = QtWidgets.QSplitter(self)
        splitter.setOrientation(QtCore.Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        left_panel = QtWidgets.QWidget(self)
        left_layout = QtWidgets.QVBoxLayout(left_panel)
        left_layout.setContentsMargins(6, 6, 6, 6)
        left_layout.setSpacing(6)

        form = QtWidgets.QFormLayout()
        self.mode_combo = QtWidgets.QComboBox(left_panel)
        self.mode_combo.addItem("Notification", "notification")
        self.mode_combo.addItem("Chat Now", "chat")
        self.preset_combo = QtWidgets.QComboBox(left_panel)
        for name in notification_preset_names():
            self.preset_combo.addItem(name, name)
        self.lang_combo = QtWidgets.QComboBox(left_panel)
        self.title_edit = QtWidgets.QLineEdit(left_panel)
        self.subtitle_edit = QtWidgets.QLineEdit(left_panel)
        form.addRow("Template", self.mode_combo)
        form.addRow("Preset", self.preset_combo)
        form.addRow("Language", self.lang_combo)
        form.addRow("Title", self.title_edit)
        form.addRow("Subtitle", self.subtitle_edit)
        left_layout.addLayout(form)

        self.stack = QtWidgets.QStackedWidget(left_panel)
        self.stack.addWidget(self._build_notification_panel())
        self.stack.addWidget(self._build_chat_panel())
        left_layout.addWidget(self.stack, 1)

        self.events_view = QtWidgets.QPlainTextEdit(left_panel)
        self.events_view.setReadOnly(True)
        self.events_view.setMaximumBlockCount(200)
        self.events_view.setPlaceholderText("Bridge calls from the preview appear here")
        left_layout.addWidget(QtWidgets.QLabel("Bridge events", left_panel))
        left_layout.addWidget(self.events_view)

        right_panel = QtWidgets.QWidget(self)
        right_layout = QtWidgets.QVBoxLayout(right_panel)
        right_layout.setContentsMargins(6, 6, 6, 6)
        right_layout.setSpacing(6)

        self.preview = QWebEngineView(right_panel)
        self.preview_page = PreviewPage(self.preview)
        shim = QWebEngineScript()
        shim.setName("cardbridge")
        shim.setSourceCode(bridge.PREVIEW_SHIM)
        shim.setInjectionPoint(QWebEngineScript.InjectionPoint.DocumentCreation)
        shim.setWorldId(QWebEngineScript.ScriptWorldId.MainWorld)
        shim.setRunsOnSubFrames(True)
        self.preview_page.scripts().insert(shim)
        self.preview.setPage(self.preview_page)
        right_layout.addWidget(QtWidgets.QLabel("Preview", right_panel))
        right_layout.addWidget(self.preview, 1)

        splitter.addWidget(left_panel)
        splitter.addWidget(right_panel)
        splitter.setSizes([420, 820])

        self.status = self.statusBar()

    def _build_notification_panel(self) -> QtWidgets.QWidget:
        panel = QtWidgets.QWidget(self)
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)
        self.chk_badge = QtWidgets.QCheckBox("Show counter badge", panel)
        self.chk_debug = QtWidgets.QCheckBox("Show debug area", panel)
        self.chk_drag_buttons = QtWidgets.QCheckBox("Draggable buttons", panel)
        self.chk_global_drag = QtWidgets.QCheckBox("Drag every element", panel)
        self.btn_next_lang = QtWidgets.QPushButton("Cycle preview language", panel)
        for widget in (self.chk_badge, self.chk_debug, self.chk_drag_buttons, self.chk_global_drag, self.btn_next_lang):
            layout.addWidget(widget)
        layout.addStretch(1)
        return panel

    def _build_chat_panel(self) -> QtWidgets.QWidget:
        panel = QtWidgets.QWidget(self)
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        form = QtWidgets.QFormLayout()
        self.bg_color_edit = QtWidgets.QLineEdit(panel)
        self.bg_image_edit = QtWidgets.QLineEdit(panel)
        self.bg_image_edit.setPlaceholderText("https://… (overrides the color)")
        form.addRow("Background", self.bg_color_edit)
        form.addRow("Background image", self.bg_image_edit)
        layout.addLayout(form)
        self.chk_checkbox = QtWidgets.QCheckBox("Show \"do not show again\"", panel)
        layout.addWidget(self.chk_checkbox)

        self.blocks_list = QtWidgets.QListWidget(panel)
        self.blocks_list.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        layout.addWidget(QtWidgets.QLabel("Blocks", panel))
        layout.addWidget(self.blocks_list, 1)

        row = QtWidgets.QHBoxLayout()
        self.btn_block_up = QtWidgets.QPushButton("Up", panel)
        self.btn_block_down = QtWidgets.QPushButton("Down", panel)
        self.btn_block_remove = QtWidgets.QPushButton("Remove", panel)
        row.addWidget(self.btn_block_up)
        row.addWidget(self.btn_block_down)
        row.addWidget(self.btn_block_remove)
        layout.addLayout(row)

        add_row = QtWidgets.QHBoxLayout()
        self.component_combo = QtWidgets.QComboBox(panel)
        for component in COMPONENT_LIBRARY:
            self.component_combo.addItem(component["label"], component["id"])
        self.btn_block_add = QtWidgets.QPushButton("Add", panel)
        add_row.addWidget(self.component_combo, 1)
        add_row.addWidget(self.btn_block_add)
        layout.addLayout(add_row)
        return panel

    def _build_menu(self) -> None:
        bar = self.menuBar()
        if bar is None:
            bar = QtWidgets.QMenuBar(self)
            self.setMenuBar(bar)

        file_menu = bar.addMenu("&File")
        self.act_export = QtGui.QAction("Export HTML…", self)
        self.act_export_positions = QtGui.QAction("Export Positions…", self)
        self.act_import_positions = QtGui.QAction("Import Positions…", self)
        self.act_validate = QtGui.QAction("Validate", self)
        self.act_quit = QtGui.QAction("Quit", self)
        if file_menu is not None:
            file_menu.addActions([self.act_export, self.act_export_positions, self.act_import_positions])
            file_menu.addSeparator()
            file_menu.addAction(self.act_validate)
            file_menu.addSeparator()
            file_menu.addAction(self.act_quit)

        help_menu = bar.addMenu("&Help")
        self.act_about = QtGui.QAction("About", self)
        if help_menu is not None:
            help_menu.addAction(self.act_about)

    def _bind_events(self) -> None:
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        self.preset_combo.currentIndexChanged.connect(self._on_preset_changed)
        self.lang_combo.currentIndexChanged.connect(self._on_lang_changed)
        self.title_edit.textChanged.connect(self._on_form_changed)
        self.subtitle_edit.textChanged.connect(self._on_form_changed)
        for chk in (self.chk_badge, self.chk_debug, self.chk_drag_buttons, self.chk_global_drag, self.chk_checkbox):
            chk.toggled.connect(self._on_form_changed)
        self.bg_color_edit.textChanged.connect(self._on_form_changed)
        self.bg_image_edit.textChanged.connect(self._on_form_changed)
        self.btn_next_lang.clicked.connect(self.cycle_language)

        self.btn_block_up.clicked.connect(lambda: self._move_selected_block(-1))
        self.btn_block_down.clicked.connect(lambda: self._move_selected_block(1))
        self.btn_block_remove.clicked.connect(self._remove_selected_block)
        self.btn_block_add.clicked.connect(self._add_component)

        self.preview_page.bridgeEvent.connect(self._on_bridge_event)
        self.preview.loadFinished.connect(self._on_preview_loaded)

        self.act_export.triggered.connect(self.export_html)
        self.act_export_positions.triggered.connect(self.export_positions)
        self.act_import_positions.triggered.connect(self.import_positions)
        self.act_validate.triggered.connect(self.show_validation)
        self.act_quit.triggered.connect(self.close)
        self.act_about.triggered.connect(self.show_about)

    # --------------------------------------------------------------- State --
    def _load_preset(self, name: str) -> TemplateConfig:
        try:
            return notification_preset(name)
        except KeyError:
            log.warning("Unknown preset %r in settings, using default", name)
            return notification_preset("default")

    def _load_chat_language(self, lang: str) -> ChatNowConfig:
        try:
            return apply_chat_language(ChatNowConfig(), lang)
        except KeyError:
            log.warning("Unknown chat language %r in settings, using en", lang)
            return ChatNowConfig()

    def _sync_controls(self) -> None:
        """Push the current configs into the widgets without triggering edits."""
        self._loading = True
        try:
            self.mode_combo.setCurrentIndex(MODES.index(self.mode))
            self.stack.setCurrentIndex(MODES.index(self.mode))
            self.preset_combo.setEnabled(self.mode == "notification")
            preset_index = self.preset_combo.findData(self.settings.get("notification_preset", "default"))
            self.preset_combo.setCurrentIndex(max(preset_index, 0))

            self.lang_combo.clear()
            if self.mode == "notification":
                for code in self.notification.i18n:
                    self.lang_combo.addItem(code, code)
                lang = self.settings.get("preview_lang", self.notification.default_lang)
                self.title_edit.setText(self.notification.title)
                self.subtitle_edit.setText(self.notification.subtitle)
            else:
                for code, preset in CHAT_LANGUAGES.items():
                    self.lang_combo.addItem(f"{preset['flag']} {preset['name']}", code)
                lang = self.settings.get("chat_lang", "en")
                self.title_edit.setText(self.chat.main_title)
                self.subtitle_edit.setText(self.chat.description)
            index = self.lang_combo.findData(lang)
            self.lang_combo.setCurrentIndex(max(index, 0))

            self.chk_badge.setChecked(self.notification.badge.show)
            self.chk_debug.setChecked(self.notification.show_debug_area)
            self.chk_drag_buttons.setChecked(any(btn.draggable for btn in self.notification.buttons))
            self.chk_global_drag.setChecked(self.notification.global_drag_mode)

            self.bg_color_edit.setText(self.chat.content_bg)
            self.bg_image_edit.setText(self.chat.content_bg_image)
            self.chk_checkbox.setChecked(self.chat.show_checkbox)
            self._refresh_blocks_list()
        finally:
            self._loading = False

    def _refresh_blocks_list(self, select_index: int = -1) -> None:
        self.blocks_list.clear()
        for block in self.chat.canvas_blocks:
            if block.is_template:
                text = f"[template] {block.template_field}"
            else:
                text = f"{block.custom_type}: {block.label or ''}"
            self.blocks_list.addItem(text)
        if 0 <= select_index < self.blocks_list.count():
            self.blocks_list.setCurrentRow(select_index)

    # ---------------------------------------------------- Editing & Preview --
    def _on_mode_changed(self, index: int) -> None:
        if self._loading:
            return
        self.mode = self.mode_combo.itemData(index) or "notification"
        self.settings.set("mode", self.mode)
        self._sync_controls()
        self.update_preview()

    def _on_preset_changed(self, index: int) -> None:
        if self._loading:
            return
        name = self.preset_combo.itemData(index)
        self.notification = self._load_preset(name)
        self.settings.set("notification_preset", name)
        self._sync_controls()
        self.update_preview()

    def _on_lang_changed(self, index: int) -> None:
        if self._loading:
            return
        code = self.lang_combo.itemData(index)
        if not code:
            return
        if self.mode == "notification":
            self.settings.set("preview_lang", code)
            # No rebuild needed, the card re-renders itself.
            self.push_to_card(bridge.set_lang_message(code))
            return
        self.chat = apply_chat_language(self.chat, code)
        self.settings.set("chat_lang", code)
        self._sync_controls()
        self.update_preview()

    def _on_form_changed(self, *_args) -> None:
        if self._loading:
            return
        self._flush_form_to_model()
        self._debounce.start()

    def _flush_form_to_model(self) -> None:
        if self.mode == "notification":
            cfg = (
                self.notification.with_title(self.title_edit.text())
                .with_subtitle(self.subtitle_edit.text())
                .with_badge(show=self.chk_badge.isChecked())
                .with_debug_area(self.chk_debug.isChecked())
                .with_global_drag_mode(self.chk_global_drag.isChecked())
            )
            if self.chk_drag_buttons.isChecked() != any(btn.draggable for btn in cfg.buttons):
                cfg = cfg.with_draggable_buttons(self.chk_drag_buttons.isChecked())
            self.notification = cfg
        else:
            cfg = self.chat.with_texts(main_title=self.title_edit.text(), description=self.subtitle_edit.text())
            image = self.bg_image_edit.text().strip()
            if image:
                cfg = cfg.with_background_image(image)
            else:
                cfg = cfg.with_background_color(self.bg_color_edit.text().strip() or ChatNowConfig.content_bg)
            self.chat = cfg.with_checkbox(self.chk_checkbox.isChecked())

    def current_html(self) -> str:
        if self.mode == "notification":
            return build_notification(self.notification)
        return build_chat(self.chat)

    def update_preview(self) -> None:
        html = self.current_html()
        self.preview.setHtml(bridge.preview_document(html), QtCore.QUrl("about:blank"))

    def _on_preview_loaded(self, ok: bool) -> None:
        # A rebuilt card starts in its default language; re-apply the chosen one.
        if not ok or self.mode != "notification":
            return
        lang = self.lang_combo.currentData()
        if lang and lang != self.notification.default_lang:
            self.push_to_card(bridge.set_lang_message(lang))

    def push_to_card(self, message: dict) -> None:
        self.preview_page.runJavaScript(bridge.receive_call(message, target=bridge.CARD_FRAME))

    def cycle_language(self) -> None:
        if self.mode != "notification" or self.lang_combo.count() == 0:
            return
        current = self.lang_combo.currentData() or self.notification.default_lang
        self.lang_combo.setCurrentIndex(self.lang_combo.findData(next_language(self.notification.i18n, current)))

    def _on_bridge_event(self, event: dict) -> None:
        data = event.get("data")
        if event.get("kind") == "call" and isinstance(data, dict):
            call = bridge.parse_bridge_call(str(data.get("method", "")), data.get("payload"))
            line = call["method"] if call["action"] is None else f"{call['method']} action={call['action']}"
            self.events_view.appendPlainText(line)
            return
        if self.mode == "notification":
            updated = apply_position_message(self.notification, data)
            if updated is not self.notification:
                # Positions come from the card itself; no rebuild, or the drag would reset.
                self.notification = updated
                if self.status is not None:
                    self.status.showMessage("Layout positions updated", 2000)

    # --------------------------------------------------------------- Blocks --
    def _move_selected_block(self, delta: int) -> None:
        row = self.blocks_list.currentRow()
        if row < 0:
            return
        target = row + delta
        if not 0 <= target < len(self.chat.canvas_blocks):
            return
        block_id = self.chat.canvas_blocks[row].id
        # Drop zones below the source are shifted by one.
        zone = target if delta < 0 else target + 1
        self.chat = self.chat.with_canvas_blocks(canvas.move_block(self.chat.canvas_blocks, block_id, zone))
        self._refresh_blocks_list(select_index=target)
        self.update_preview()

    def _remove_selected_block(self) -> None:
        row = self.blocks_list.currentRow()
        if row < 0:
            return
        block_id = self.chat.canvas_blocks[row].id
        self.chat = self.chat.with_canvas_blocks(canvas.remove_block(self.chat.canvas_blocks, block_id))
        self._refresh_blocks_list(select_index=min(row, len(self.chat.canvas_blocks) - 1))
        self.update_preview()

    def _add_component(self) -> None:
        component_id = self.component_combo.currentData()
        try:
            component = find_component(component_id)
        except KeyError:
            return
        row = self.blocks_list.currentRow()
        index = row + 1 if row >= 0 else len(self.chat.canvas_blocks)
        self.chat = self.chat.with_canvas_blocks(canvas.insert_from_payload(self.chat.canvas_blocks, component, index))
        self._refresh_blocks_list(select_index=index)
        self.update_preview()

    # -------------------------------------------------------------- Export --
    def _export_dir(self) -> str:
        return self.settings.get("last_export_dir", "") or str(Path.home())

    def export_html(self) -> None:
        default = os.path.join(self._export_dir(), f"{self.mode}.html")
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export HTML", default, "HTML (*.html)")
        if not path:
            return
        out = storage.save_html(path, self.current_html())
        self.settings.set("last_export_dir", str(out.parent))
        if self.status is not None:
            self.status.showMessage(f"Exported {out.name}", 4000)

    def export_positions(self) -> None:
        if self.mode != "notification":
            QtWidgets.QMessageBox.information(self, "Positions", "Positions only apply to notification cards.")
            return
        default = os.path.join(self._export_dir(), "positions.json")
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export Positions", default, "JSON (*.json)")
        if not path:
            return
        out = storage.save_positions(path, self.notification)
        if self.status is not None:
            self.status.showMessage(f"Saved {out.name}", 4000)

    def import_positions(self) -> None:
        if self.mode != "notification":
            return
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Import Positions", self._export_dir(), "JSON (*.json)")
        if not path:
            return
        try:
            self.notification = storage.load_positions(path, self.notification)
        except (OSError, PositionsFormatError) as exc:
            QtWidgets.QMessageBox.warning(self, "Import positions", str(exc))
            return
        self.update_preview()
        if self.status is not None:
            self.status.showMessage(f"Loaded {os.path.basename(path)}", 4000)

    def show_validation(self) -> None:
        if self.mode == "notification":
            result = validate_template_config(self.notification)
        else:
            result = validate_chat_config(self.chat)
        message = QtWidgets.QMessageBox(self)
        message.setWindowTitle("Validation")
        message.setIcon(QtWidgets.QMessageBox.Icon.Warning if result.errors else QtWidgets.QMessageBox.Icon.Information)
        message.setText("No problems found." if result.ok and not result.warnings else "Validation finished.")
        details: list[str] = []
        if result.errors:
            details.append("Errors:\n" + "\n".join(result.errors))
        if result.warnings:
            details.append("Warnings:\n" + "\n".join(result.warnings))
        if details:
            message.setInformativeText("\n\n".join(details))
        message.exec()

    # ---------------------------------------------------------------- Misc --
    def show_about(self) -> None:
        QtWidgets.QMessageBox.information(
            self,
            "About",
            f"{APP_TITLE}\n\nBuilds self-contained notification and chat cards for embedded WebViews.",
        )
