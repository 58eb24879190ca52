# ui/ui_disambiguation.py

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QListWidget, QPushButton, QVBoxLayout, QWidget
)

from commands.command_state import CommandMode, SessionView, describe_segment


class DisambiguationPanel(QWidget):
    """Lista de candidatos del producto en curso. Solo pinta y reenvía."""

    chosen = Signal(int)
    back_requested = Signal()
    cancel_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMaximumWidth(380)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignTop)

        self.progress_label = QLabel("")
        self.segment_label = QLabel("")
        self.segment_label.setWordWrap(True)
        self.segment_label.setStyleSheet("font-weight: bold;")
        self.skipped_label = QLabel("")
        self.skipped_label.setWordWrap(True)

        self.candidate_list = QListWidget()
        self.candidate_list.itemDoubleClicked.connect(
            lambda item: self.chosen.emit(self.candidate_list.row(item))
        )

        buttons = QHBoxLayout()
        self.choose_btn = QPushButton("Elegir")
        self.choose_btn.clicked.connect(self._emit_current)
        self.back_btn = QPushButton("Atrás")
        self.back_btn.clicked.connect(self.back_requested.emit)
        self.cancel_btn = QPushButton("Cancelar")
        self.cancel_btn.clicked.connect(self.cancel_requested.emit)
        buttons.addWidget(self.choose_btn)
        buttons.addWidget(self.back_btn)
        buttons.addWidget(self.cancel_btn)

        layout.addWidget(self.progress_label)
        layout.addWidget(self.segment_label)
        layout.addWidget(self.candidate_list)
        layout.addLayout(buttons)
        layout.addWidget(self.skipped_label)

        self.hide()

    def _emit_current(self):
        row = self.candidate_list.currentRow()
        self.chosen.emit(row if row >= 0 else 0)

    def show_view(self, view: SessionView):
        if view.mode == CommandMode.IDLE or view.segment is None:
            self.candidate_list.clear()
            self.hide()
            return

        multi = view.mode == CommandMode.AWAITING_MULTI_CHOICE
        self.progress_label.setText(
            f"Producto {view.cursor + 1} de {view.total}" if multi else ""
        )
        self.back_btn.setEnabled(multi and view.cursor > 0)

        text = describe_segment(view.segment)
        if view.confirmed is not None:
            text += f"  (ya aplicado: {view.confirmed.entry.name})"
        self.segment_label.setText(text)

        self.candidate_list.clear()
        for i, candidate in enumerate(view.candidates):
            entry = candidate.entry
            code = f"[{entry.code}] " if entry.code else ""
            self.candidate_list.addItem(
                f"{i + 1}) {code}{entry.name}  ·  {candidate.score:.0f}%"
            )
        self.candidate_list.setCurrentRow(0)

        if view.skipped:
            self.skipped_label.setText(
                "Sin coincidencias: " + ", ".join(describe_segment(s) for s in view.skipped)
            )
        else:
            self.skipped_label.setText("")

        self.show()
