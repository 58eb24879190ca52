# models/inventory_model.py
import math
from dataclasses import replace

from loguru import logger

from models.inventory_item import CatalogEntry, UpdateIntent


DEFAULT_HEADER = ["Material", "Producto", "UMB", "Stock"]


class InventoryModel:
    def __init__(self, entries=None, header=None):
        self.entries: list[CatalogEntry] = []
        self.header: list[str] = list(header or DEFAULT_HEADER)
        if entries:
            self.load(entries, header)

    # --------------------
    # Carga / consulta
    # --------------------

    def load(self, entries, header=None):
        # Las posiciones siempre reflejan el orden del inventario cargado
        self.entries = [
            replace(entry, position=index)
            for index, entry in enumerate(entries)
        ]
        if header:
            self.header = list(header)

    def clear(self):
        self.entries = []
        self.header = list(DEFAULT_HEADER)

    def row_count(self):
        return len(self.entries)

    def get_entry(self, position: int) -> CatalogEntry:
        return self.entries[position]

    def snapshot(self) -> tuple[CatalogEntry, ...]:
        """Copia inmutable para una petición de interpretación."""
        return tuple(self.entries)

    # --------------------
    # Actualizaciones
    # --------------------

    def apply_intent(self, intent: UpdateIntent) -> CatalogEntry:
        entry = self._entry_at(intent.target_position)
        updated = replace(
            entry,
            quantity_on_hand=entry.quantity_on_hand + intent.delta_quantity,
        )
        self.entries[intent.target_position] = updated
        logger.info(
            "Stock actualizado: {} {} → {}",
            updated.name, entry.quantity_on_hand, updated.quantity_on_hand,
        )
        return updated

    def set_quantity(self, position: int, value) -> CatalogEntry:
        quantity = float(value)
        if not math.isfinite(quantity):
            raise ValueError(f"Cantidad inválida: {value}")
        entry = self._entry_at(position)
        updated = replace(entry, quantity_on_hand=quantity)
        self.entries[position] = updated
        return updated

    def _entry_at(self, position: int) -> CatalogEntry:
        if not 0 <= position < len(self.entries):
            raise IndexError(f"Fila fuera de rango: {position}")
        return self.entries[position]
