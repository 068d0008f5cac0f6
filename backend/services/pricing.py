from collections.abc import Iterable

from backend.core.catalog import Catalog, CatalogItem, get_catalog
from backend.services.exceptions import UnknownAddon, UnknownPackage


def resolve_selection(
    package_key: str,
    addon_keys: Iterable[str],
    catalog: Catalog | None = None,
) -> tuple[CatalogItem, list[CatalogItem]]:
    catalog = catalog or get_catalog()

    package = catalog.find_package(package_key)
    if package is None:
        raise UnknownPackage(package_key)

    addons: dict[str, CatalogItem] = {}
    for addon_key in addon_keys:
        addon = catalog.find_addon(addon_key)
        if addon is None:
            raise UnknownAddon(addon_key)
        addons[addon.id] = addon

    return package, sorted(addons.values(), key=lambda item: item.id)


def total(package: CatalogItem, addons: Iterable[CatalogItem]) -> int:
    """Package price plus each add-on price, in whole currency units."""
    return package.price + sum(addon.price for addon in addons)


def price(package_key: str, addon_keys: Iterable[str], catalog: Catalog | None = None) -> int:
    """Total for a package plus its distinct add-ons."""
    package, addons = resolve_selection(package_key, addon_keys, catalog)
    return total(package, addons)
