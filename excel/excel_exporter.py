#excel.excel_exporter

import os

import openpyxl
from dotenv import load_dotenv
from loguru import logger
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from models.inventory_item import format_quantity

load_dotenv()

OUTPUT_DIR = os.getenv("EXCEL_OUTPUT_DIR", "output")

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50


def export_inventory_to_excel(model, source_name: str = "inventario.xlsx", output_dir: str | None = None):
    if model.row_count() == 0:
        raise ValueError("No hay datos para exportar")

    output_dir = output_dir or OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    stem = os.path.splitext(os.path.basename(source_name))[0] or "inventario"
    output_path = os.path.join(output_dir, f"{stem}_inventario.xlsx")

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Inventario"

    # estilos
    header_fill = PatternFill(start_color="BCBCBC", end_color="BCBCBC", fill_type="solid")
    header_font = Font(bold=True)
    header_alignment = Alignment(horizontal="center")

    # Cabecera original, en mayúsculas
    for col, title in enumerate(model.header, start=1):
        cell = ws.cell(row=1, column=col, value=str(title).upper())
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment

    for row_index, entry in enumerate(model.entries, start=2):
        values = [entry.code, entry.name, entry.unit, entry.quantity_on_hand]
        for col, value in enumerate(values, start=1):
            ws.cell(row=row_index, column=col, value=value)

    # Ancho de columnas entre 10 y 50
    for col in range(1, ws.max_column + 1):
        longest = 0
        for row in range(1, ws.max_row + 1):
            value = ws.cell(row=row, column=col).value
            if value is not None:
                text = format_quantity(value) if isinstance(value, float) else str(value)
                longest = max(longest, len(text))
        width = max(MIN_COLUMN_WIDTH, min(MAX_COLUMN_WIDTH, longest + 2))
        ws.column_dimensions[get_column_letter(col)].width = width

    wb.save(output_path)
    logger.info("Inventario exportado: {}", output_path)

    return output_path
