import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence

from .catalog import CatalogSource
from .matcher import PLACEHOLDER_SCORE, match_ingredients
from .schemas import Ingredient, MatchedProduct, SupermarketQuote

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"\d[\d.,]*")
_SEPARATORS = re.compile(r"[.,]")


def parse_price(price: str) -> Optional[Decimal]:
    """Parse a currency-formatted price such as ``"€4.99"``, ``"1,99 €"``
    or ``"1.234,56 €"``.

    The last separator is the decimal mark unless it repeats, in which case
    every separator groups thousands ("1.234.567"). Returns None when the
    string holds no amount ("Precio no disponible").
    """
    if not price:
        return None
    found = _NUMBER.search(price)
    if not found:
        return None
    raw = found.group(0).rstrip(".,")
    mark = max(raw.rfind("."), raw.rfind(","))
    if mark == -1 or raw.count(raw[mark]) > 1:
        number = _SEPARATORS.sub("", raw)
    else:
        number = _SEPARATORS.sub("", raw[:mark]) + "." + raw[mark + 1:]
    try:
        return Decimal(number)
    except InvalidOperation:
        return None


def basket_total(products: Iterable[MatchedProduct]) -> Decimal:
    total = Decimal("0")
    for product in products:
        if product.match_score == PLACEHOLDER_SCORE:
            continue
        amount = parse_price(product.price)
        if amount is not None:
            total += amount
    return total


def compare_supermarkets(
    ingredients: Sequence[Ingredient], catalog: CatalogSource
) -> List[SupermarketQuote]:
    """Quote the same ingredient list at every supermarket in ``catalog``.

    Quotes are ordered by fewest missing ingredients, then cheapest total.
    """
    quotes = []
    for supermarket in catalog.supermarkets():
        products = match_ingredients(supermarket, ingredients, catalog)
        missing = sum(1 for p in products if p.match_score == PLACEHOLDER_SCORE)
        total = basket_total(products).quantize(Decimal("0.01"))
        quotes.append(SupermarketQuote(
            supermarket=supermarket,
            total=float(total),
            matched=len(products) - missing,
            missing=missing,
            products=products,
        ))
    quotes.sort(key=lambda q: (q.missing, q.total))
    if quotes:
        logger.info(f"Cheapest basket at {quotes[0].supermarket}: {quotes[0].total:.2f}")
    return quotes
