import pytest

from commands.matching_config import MatchingSettings
from models.inventory_item import CatalogEntry


@pytest.fixture
def catalog():
    names = [
        ("CC350", "Coca Cola 350ml", "UN", 10),
        ("CV001", "Cervezas Polar Pilsen", "UN", 24),
        ("PP150", "Papas Fritas 150g", "BOL", 5),
        ("AG500", "Agua Mineral 500ml", "UN", 0),
        ("RS001", "Ron Santa Teresa 1796", "BOT", 3),
    ]
    return tuple(
        CatalogEntry(code=code, name=name, unit=unit, quantity_on_hand=qty, position=i)
        for i, (code, name, unit, qty) in enumerate(names)
    )


@pytest.fixture
def settings():
    return MatchingSettings()
