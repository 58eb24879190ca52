# excel/excel_importer.py
import os

import openpyxl
from loguru import logger

from models.inventory_item import CatalogEntry
from models.inventory_model import DEFAULT_HEADER
from voice.voice_normalizer import normalize_text


# Cabeceras reconocidas (normalizadas) para cada campo
COLUMN_NAMES = {
    "code": {"material", "codigo", "code", "sku", "referencia", "ref"},
    "name": {"producto", "descripcion", "nombre", "articulo", "product"},
    "unit": {"umb", "unidad", "ud", "uds", "unit"},
    "stock": {"stock", "cantidad", "existencia", "existencias", "inventario"},
}

# Material | Producto | UMB | Stock
FIELD_ORDER = ("code", "name", "unit", "stock")
DEFAULT_COLUMNS = {field_name: i for i, field_name in enumerate(FIELD_ORDER)}


def _detect_columns(header: list) -> dict[str, int]:
    columns = {}
    for index, value in enumerate(header):
        key = normalize_text(str(value)) if value is not None else ""
        for field_name, names in COLUMN_NAMES.items():
            if key in names and field_name not in columns:
                columns[field_name] = index

    if "name" not in columns:
        logger.warning("Cabecera sin columna de producto, se usa el orden por defecto")
        return dict(DEFAULT_COLUMNS)

    return columns


def _cell(row, index):
    if index is None or index >= len(row):
        return None
    return row[index]


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _as_quantity(value) -> float:
    if value is None or value == "":
        return 0
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return 0


def entry_from_row(row, columns: dict[str, int], position: int) -> CatalogEntry | None:
    """
    Sin nombre → fila ignorada.
    Sin código o unidad → "". Stock vacío o no numérico → 0.
    """
    name = _as_text(_cell(row, columns.get("name")))
    if not name:
        return None

    return CatalogEntry(
        code=_as_text(_cell(row, columns.get("code"))),
        name=name,
        unit=_as_text(_cell(row, columns.get("unit"))),
        quantity_on_hand=_as_quantity(_cell(row, columns.get("stock"))),
        position=position,
    )


def import_inventory(path: str) -> tuple[list[str], list[CatalogEntry]]:
    """Primera hoja; fila 1 = cabecera, datos desde la fila 2."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"No se encuentra el Excel: {path}")

    wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)

        header_row = next(rows, None)
        if header_row is None:
            return [], []

        columns = _detect_columns(list(header_row))
        header = [
            _as_text(_cell(header_row, columns.get(field_name))) or default
            for field_name, default in zip(FIELD_ORDER, DEFAULT_HEADER)
        ]

        entries: list[CatalogEntry] = []
        for row in rows:
            entry = entry_from_row(row, columns, len(entries))
            if entry is not None:
                entries.append(entry)
    finally:
        wb.close()

    logger.info("Inventario cargado: {} productos desde {}", len(entries), path)
    return header, entries
