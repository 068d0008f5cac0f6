"""Service packages and add-ons offered on the booking form.

The catalog is owned outside the booking engine. By default the built-in
list below is served; set ``CATALOG_PATH`` to a JSON file shaped like
``{"packages": [...], "addons": [...]}`` to replace it.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from backend.core import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    price: int
    description: str = ""


@dataclass(frozen=True)
class Catalog:
    packages: tuple[CatalogItem, ...]
    addons: tuple[CatalogItem, ...]

    def find_package(self, key: str) -> CatalogItem | None:
        return _find(self.packages, key)

    def find_addon(self, key: str) -> CatalogItem | None:
        return _find(self.addons, key)


DEFAULT_CATALOG = {
    "packages": [
        {
            "id": "express-wash",
            "name": "Express Wash",
            "price": 60,
            "description": "Hand wash, wheels and tires, streak-free glass.",
        },
        {
            "id": "interior-refresh",
            "name": "Interior Refresh",
            "price": 90,
            "description": "Vacuum, wipe-down of all surfaces, interior glass.",
        },
        {
            "id": "full-detail",
            "name": "Full Detail",
            "price": 150,
            "description": "Complete interior and exterior detail.",
        },
        {
            "id": "showroom",
            "name": "Showroom Package",
            "price": 250,
            "description": "Full detail plus clay bar and spray sealant.",
        },
    ],
    "addons": [
        {"id": "interior-shampoo", "name": "Interior Shampoo", "price": 40},
        {"id": "pet-hair-removal", "name": "Pet Hair Removal", "price": 30},
        {"id": "engine-bay", "name": "Engine Bay Cleaning", "price": 35},
        {"id": "headlight-restoration", "name": "Headlight Restoration", "price": 50},
        {"id": "ceramic-spray", "name": "Ceramic Spray Coating", "price": 75},
    ],
}


def _find(items: tuple[CatalogItem, ...], key: str) -> CatalogItem | None:
    normalized = key.strip().lower()
    for item in items:
        if item.id.lower() == normalized or item.name.lower() == normalized:
            return item
    return None


def _parse_items(raw_items: list[dict]) -> tuple[CatalogItem, ...]:
    return tuple(
        CatalogItem(
            id=str(raw['id']),
            name=str(raw['name']),
            price=int(raw['price']),
            description=str(raw.get('description', '')),
        )
        for raw in raw_items
    )


def build_catalog(data: dict) -> Catalog:
    return Catalog(
        packages=_parse_items(data.get('packages', [])),
        addons=_parse_items(data.get('addons', [])),
    )


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    if config.CATALOG_PATH:
        path = Path(config.CATALOG_PATH)
        logger.info('Loading service catalog from %s', path)
        with path.open(encoding='utf-8') as handle:
            return build_catalog(json.load(handle))

    return build_catalog(DEFAULT_CATALOG)
