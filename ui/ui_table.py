# ui/ui_table.py

import os

from dotenv import load_dotenv
from loguru import logger
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFileDialog, QHBoxLayout, QInputDialog, QLabel, QLineEdit, QListWidget,
    QMainWindow, QPushButton, QTableWidget, QTableWidgetItem, QVBoxLayout,
    QWidget
)

from commands.alias_expansion import alias_conflict
from commands.command_state import CommandFeedback, CommandState, describe_segment
from db.alias_repository import AliasRepository
from excel.excel_exporter import export_inventory_to_excel
from excel.excel_importer import import_inventory
from models.inventory_model import InventoryModel
from ui.ui_disambiguation import DisambiguationPanel
from voice.grammar_builder import build_grammar
from voice.voice_listener import VoiceListener

load_dotenv()

STOCK_COLUMN = 3
USE_GRAMMAR = os.getenv("VOSK_USE_GRAMMAR", "false").lower() in ("1", "true", "yes")


class InventoryTableWindow(QMainWindow):
    def __init__(self, alias_repository=None, settings=None):
        super().__init__()
        self.setWindowTitle("Inventario por voz")
        self.resize(1200, 600)
        self._updating_ui = False

        # --------------------------------------------------
        # Datos / estado
        # --------------------------------------------------
        self.model = InventoryModel()
        self.aliases = alias_repository or AliasRepository()
        self.state = CommandState(self.aliases.to_store(), settings)
        self.source_name = ""

        self.listening = False
        self.voice_worker = None
        self.highlighted_rows: set[int] = set()

        # --------------------------------------------------
        # Barra lateral izquierda
        # --------------------------------------------------
        self.sidebar = QWidget()
        self.sidebar.setMaximumWidth(70)
        sidebar_layout = QVBoxLayout(self.sidebar)
        sidebar_layout.setAlignment(Qt.AlignTop)
        sidebar_layout.setSpacing(10)

        self.import_button = self._sidebar_button("📂", "Cargar Excel", self.import_excel)
        self.excel_button = self._sidebar_button("💾", "Exportar inventario", self.export_excel)
        self.alias_button = self._sidebar_button("🏷️", "Añadir alias al producto", self.add_alias)
        for button in (self.import_button, self.excel_button, self.alias_button):
            sidebar_layout.addWidget(button, alignment=Qt.AlignHCenter)

        sidebar_layout.addStretch()

        self.listen_button = self._sidebar_button("🎙️", "Escuchar", self.listen_voice)
        sidebar_layout.addWidget(self.listen_button, alignment=Qt.AlignHCenter)

        # --------------------------------------------------
        # Tabla
        # --------------------------------------------------
        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(self.model.header)
        self.table.cellChanged.connect(self.on_cell_changed)
        self.table.setColumnWidth(0, 120)
        self.table.setColumnWidth(1, 380)
        self.table.setColumnWidth(2, 70)
        self.table.setColumnWidth(3, 90)

        # --------------------------------------------------
        # Selección de candidatos y pendientes
        # --------------------------------------------------
        self.panel = DisambiguationPanel()
        self.panel.chosen.connect(lambda index: self.show_feedback(self.state.choose(index)))
        self.panel.back_requested.connect(lambda: self.show_feedback(self.state.step_back()))
        self.panel.cancel_requested.connect(lambda: self.show_feedback(self.state.cancel()))

        self.skipped_list = QListWidget()
        self.skipped_list.setMaximumWidth(380)
        self.skipped_list.setToolTip("Doble clic para volver a enviar")
        self.skipped_list.itemDoubleClicked.connect(self.on_skipped_clicked)
        self.skipped_list.hide()

        side_panel = QVBoxLayout()
        side_panel.addWidget(self.panel)
        side_panel.addWidget(self.skipped_list)

        # --------------------------------------------------
        # Input comandos
        # --------------------------------------------------
        self.command_input = QLineEdit()
        self.command_input.setPlaceholderText("Ej: coca cola veinte, cervezas 12")
        self.command_input.returnPressed.connect(self.process_command)

        self.partial_label = QLabel("")
        self.partial_label.setStyleSheet("color: gray; font-style: italic;")
        self.status_label = QLabel("Carga un archivo Excel para comenzar el inventario")

        # --------------------------------------------------
        # Layout principal
        # --------------------------------------------------
        table_layout = QVBoxLayout()
        table_layout.addWidget(self.table)
        table_layout.addWidget(self.partial_label)
        table_layout.addWidget(self.status_label)
        table_layout.addWidget(self.command_input)

        main_layout = QHBoxLayout()
        main_layout.addWidget(self.sidebar)
        main_layout.addLayout(table_layout)
        main_layout.addLayout(side_panel)

        container = QWidget()
        container.setLayout(main_layout)
        self.setCentralWidget(container)

    def _sidebar_button(self, icon, tooltip, slot):
        button = QPushButton(icon)
        button.setFixedSize(40, 40)
        button.setToolTip(tooltip)
        button.clicked.connect(slot)
        return button

    # ======================================================
    # Tabla
    # ======================================================

    def refresh_row(self, row_index):
        entry = self.model.get_entry(row_index)
        self._updating_ui = True
        self.table.blockSignals(True)

        for col_index, text in enumerate(entry.as_list()):
            item = self.table.item(row_index, col_index)
            if item is None:
                item = QTableWidgetItem()
                self.table.setItem(row_index, col_index, item)

            # Solo el stock se edita a mano
            flags = Qt.ItemIsEnabled | Qt.ItemIsSelectable
            if col_index == STOCK_COLUMN:
                flags |= Qt.ItemIsEditable
            item.setFlags(flags)
            item.setText(text)

            if row_index in self.highlighted_rows:
                item.setBackground(QColor(200, 240, 200))
            else:
                item.setBackground(Qt.white)

        self.table.blockSignals(False)
        self._updating_ui = False

    def refresh_all_rows(self):
        self.table.setRowCount(self.model.row_count())
        self.table.setHorizontalHeaderLabels(self.model.header)
        for r in range(self.model.row_count()):
            self.refresh_row(r)

    def on_cell_changed(self, row, column):
        if self._updating_ui or column != STOCK_COLUMN:
            return

        item = self.table.item(row, column)
        text = (item.text() if item else "").replace(",", ".")
        try:
            entry = self.model.set_quantity(row, text)
            self.status_label.setText(f"Stock de {entry.name}: {entry.as_list()[STOCK_COLUMN]}")
        except ValueError:
            self.status_label.setText(f"Cantidad inválida: {text}")
        self.refresh_row(row)

    # ======================================================
    # Comandos (texto / voz)
    # ======================================================

    def process_command(self):
        text = self.command_input.text()
        self.command_input.clear()
        if text.strip():
            self.handle_text(text)

    def handle_text(self, text):
        if self.model.row_count() == 0:
            self.status_label.setText("No hay datos de Excel cargados")
            return
        self.show_feedback(self.state.handle_text(text, self.model.snapshot()))

    def show_feedback(self, feedback: CommandFeedback):
        for intent in feedback.intents:
            self.model.apply_intent(intent)
            self.highlighted_rows.add(intent.target_position)
            self.refresh_row(intent.target_position)
            self.table.scrollToItem(self.table.item(intent.target_position, 1))

        if feedback.skipped:
            self.skipped_list.clear()
            for segment in feedback.skipped:
                self.skipped_list.addItem(describe_segment(segment))
            self.skipped_list.show()

        self.status_label.setText(feedback.message)
        self.panel.show_view(self.state.view())

    def on_skipped_clicked(self, item):
        self.command_input.setText(item.text())
        self.skipped_list.takeItem(self.skipped_list.row(item))
        if self.skipped_list.count() == 0:
            self.skipped_list.hide()
        self.command_input.setFocus()

    def listen_voice(self):
        if not self.listening:
            self.listening = True
            self.listen_button.setText("⏹️")
            grammar = None
            if USE_GRAMMAR:
                grammar = build_grammar(self.model.snapshot(), self.state.alias_store)
            self.voice_worker = VoiceListener(grammar=grammar)
            self.voice_worker.result_ready.connect(self.on_voice_result)
            self.voice_worker.partial_ready.connect(self.partial_label.setText)
            self.voice_worker.error.connect(self.status_label.setText)
            self.voice_worker.start()
        else:
            self.listening = False
            self.listen_button.setText("🎙️")
            if self.voice_worker:
                self.voice_worker.stop()
                self.voice_worker = None
            self.partial_label.setText("")

    def on_voice_result(self, text):
        self.partial_label.setText(f'"{text}"')
        self.handle_text(text)

    # ======================================================
    # Excel / alias
    # ======================================================

    def import_excel(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Cargar inventario", "", "Excel (*.xlsx *.xlsm)"
        )
        if not path:
            return
        try:
            header, entries = import_inventory(path)
        except Exception as e:
            logger.exception("Error cargando {}", path)
            self.status_label.setText(f"Error al procesar archivo: {e}")
            return

        self.state.cancel()
        self.model.load(entries, header)
        self.source_name = os.path.basename(path)
        self.highlighted_rows.clear()
        self.refresh_all_rows()
        self.panel.show_view(self.state.view())
        self.status_label.setText(
            f"Se cargaron {self.model.row_count()} registros desde {self.source_name}"
        )

    def export_excel(self):
        try:
            path = export_inventory_to_excel(self.model, self.source_name or "inventario.xlsx")
            self.status_label.setText(f"Excel creado: {path}")
        except Exception as e:
            self.status_label.setText(f"Error exportando Excel: {e}")

    def add_alias(self):
        row = self.table.currentRow()
        if row < 0 or row >= self.model.row_count():
            self.status_label.setText("Selecciona un producto para añadir un alias")
            return

        entry = self.model.get_entry(row)
        alias, ok = QInputDialog.getText(self, "Nuevo alias", f"Alias para {entry.name}:")
        if not ok or not alias.strip():
            return

        other = alias_conflict(alias, entry, self.model.snapshot(), self.state.alias_store)
        if other is not None:
            self.status_label.setText(f"El alias '{alias.strip()}' ya corresponde a {other.name}")
            return

        try:
            self.aliases.add_alias(entry, alias)
            self.state.alias_store.add_alias(entry, alias)
            self.status_label.setText(f"Alias '{alias.strip().lower()}' añadido a {entry.name}")
        except Exception as e:
            self.status_label.setText(f"Error guardando alias: {e}")
