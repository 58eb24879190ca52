# db/alias_repository.py
import os
import sqlite3

from dotenv import load_dotenv
from loguru import logger

from commands.alias_expansion import (
    InMemoryAliasStore,
    alias_key,
    generate_auto_aliases,
)
from models.inventory_item import CatalogEntry

load_dotenv()

DB_PATH = os.getenv("ALIASES_DB_PATH", "aliases.db")


class AliasRepository:
    """
    Alias personalizados persistidos en SQLite.

    Tabla ProductAliases(product_key, alias), donde product_key es el
    nombre normalizado del producto.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_PATH
        self._ensure_schema()

    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self):
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS ProductAliases (
                    product_key TEXT NOT NULL,
                    alias TEXT NOT NULL,
                    PRIMARY KEY (product_key, alias)
                )
            """)
            conn.commit()
        finally:
            conn.close()

    # --------------------
    # Escritura
    # --------------------

    def add_alias(self, entry_or_name, alias: str):
        alias = (alias or "").strip().lower()
        if not alias:
            raise ValueError("El alias no puede estar vacío")

        key = alias_key(entry_or_name)
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO ProductAliases (product_key, alias) VALUES (?, ?)",
                (key, alias),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Alias guardado: {} → {}", alias, key)

    # --------------------
    # Lectura
    # --------------------

    def aliases_for_key(self, key: str) -> set[str]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT alias FROM ProductAliases WHERE product_key = ? ORDER BY alias",
                (key,),
            ).fetchall()
        finally:
            conn.close()
        return {row["alias"] for row in rows}

    def load_all(self) -> dict[str, set[str]]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT product_key, alias FROM ProductAliases ORDER BY product_key, alias"
            ).fetchall()
        finally:
            conn.close()

        aliases: dict[str, set[str]] = {}
        for row in rows:
            aliases.setdefault(row["product_key"], set()).add(row["alias"])
        return aliases

    def variants_for(self, entry: CatalogEntry) -> set[str]:
        return generate_auto_aliases(entry.name) | self.aliases_for_key(alias_key(entry))

    def to_store(self) -> InMemoryAliasStore:
        """Copia en memoria, una sola consulta, para catálogos grandes."""
        return InMemoryAliasStore(self.load_all())
