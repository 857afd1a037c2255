import json
from pathlib import Path
from typing import Dict, List, Mapping, Protocol

from sqlalchemy.orm import Session

from . import crud
from .schemas import CatalogProduct, FALLBACK_IMAGE, NO_PRICE


class CatalogSource(Protocol):
    """Where supermarket catalogs come from.

    Matching only depends on this interface, so the bundled mock catalogs
    and a real product feed are interchangeable.
    """

    def get_products(self, supermarket: str) -> List[CatalogProduct]:
        ...

    def supermarkets(self) -> List[str]:
        ...


class StaticCatalog:
    """Read-only in-memory catalogs keyed by lowercase supermarket name."""

    def __init__(self, catalogs: Mapping[str, List[CatalogProduct]]):
        self._catalogs = {k.lower(): tuple(v) for k, v in catalogs.items()}

    def get_products(self, supermarket: str) -> List[CatalogProduct]:
        return list(self._catalogs.get(supermarket.lower(), ()))

    def supermarkets(self) -> List[str]:
        return sorted(k for k, v in self._catalogs.items() if v)


class DatabaseCatalog:
    """Catalogs stored in the ``products`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_products(self, supermarket: str) -> List[CatalogProduct]:
        rows = crud.get_products(self.db, supermarket.lower())
        return [CatalogProduct.model_validate(r) for r in rows]

    def supermarkets(self) -> List[str]:
        return crud.get_supermarkets(self.db)


def _parse_product(item: dict) -> CatalogProduct | None:
    # raw scraper rows use Spanish keys
    name = (item.get("nombre") or item.get("name") or "").strip()
    if not name:
        return None
    return CatalogProduct(
        name=name,
        price=item.get("precio") or item.get("price") or NO_PRICE,
        image=item.get("imagen") or item.get("image") or FALLBACK_IMAGE,
    )


def load_catalog_file(path) -> Dict[str, List[CatalogProduct]]:
    """Load supermarket catalogs from a JSON file.

    Args:
        path (str or Path): JSON object mapping supermarket name to a list
            of product rows.

    Returns:
        dict: lowercase supermarket name -> list of CatalogProduct. Rows
        without a name are skipped. A missing file yields ``{}``.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    catalogs = {}
    for supermarket, items in raw.items():
        products = [_parse_product(i) for i in items]
        catalogs[supermarket.lower()] = [prod for prod in products if prod is not None]
    return catalogs
