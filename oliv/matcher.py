"""Match recipe ingredients to supermarket catalog products.

Each distinct ingredient gets exactly one product back: the best catalog
entry when its similarity clears ``MATCH_THRESHOLD``, otherwise a generic
placeholder scored ``PLACEHOLDER_SCORE``. Results are sorted best first.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from .catalog import CatalogSource
from .errors import NotFoundError, ValidationError
from .normalize import normalize_ingredient, search_terms, similarity, slugify
from .schemas import CatalogProduct, FALLBACK_IMAGE, Ingredient, MatchedProduct, NO_PRICE

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.3
PLACEHOLDER_SCORE = 0.1
PLACEHOLDER_SUFFIX = "(producto genérico)"


def score_product(ingredient_name: str, product_name: str) -> float:
    """Best similarity between an ingredient (and its synonyms) and a product name."""
    name = ingredient_name.lower()
    product = product_name.lower()
    best = max(similarity(term, product) for term in search_terms(name))
    return max(best, similarity(name, product))


def find_best_match(
    supermarket: str, ingredient: Ingredient, products: Iterable[CatalogProduct], index: int = 0
) -> Optional[MatchedProduct]:
    best_product = None
    best_score = 0.0
    for product in products:
        if not product.name:
            continue
        score = score_product(ingredient.name, product.name)
        # first product reaching the top score wins ties
        if score > best_score and score > MATCH_THRESHOLD:
            best_score = score
            best_product = product

    if best_product is None:
        return None
    return MatchedProduct(
        id=f"{supermarket}-{index}-{slugify(ingredient.name)}-{slugify(best_product.name)}",
        name=best_product.name,
        price=best_product.price,
        image=best_product.image,
        original_ingredient=ingredient.name,
        match_score=best_score,
    )


def placeholder_product(ingredient: Ingredient, index: int = 0) -> MatchedProduct:
    return MatchedProduct(
        id=f"no-match-{index}-{slugify(ingredient.name)}",
        name=f"{ingredient.name} {PLACEHOLDER_SUFFIX}",
        price=NO_PRICE,
        image=FALLBACK_IMAGE,
        original_ingredient=ingredient.name,
        match_score=PLACEHOLDER_SCORE,
    )


def dedupe_ingredients(ingredients: Iterable[Ingredient]) -> List[Ingredient]:
    seen = set()
    unique = []
    for ingredient in ingredients:
        key = normalize_ingredient(ingredient.name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(ingredient)
    return unique


def match_products(
    supermarket: str, ingredients: Sequence[Ingredient], products: Sequence[CatalogProduct]
) -> List[MatchedProduct]:
    matched = []
    # the position among distinct ingredients keeps ids unique when names share a slug
    for index, ingredient in enumerate(dedupe_ingredients(ingredients)):
        match = find_best_match(supermarket, ingredient, products, index)
        matched.append(match if match is not None else placeholder_product(ingredient, index))
    # sorted() is stable, so equal scores keep input order
    return sorted(matched, key=lambda p: p.match_score, reverse=True)


def match_ingredients(
    supermarket_id: str, ingredients: Optional[Sequence[Ingredient]], catalog: CatalogSource
) -> List[MatchedProduct]:
    """Return one matched or placeholder product per distinct ingredient.

    Raises:
        ValidationError: ``ingredients`` is missing or empty, or
            ``supermarket_id`` is blank.
        NotFoundError: the catalog has no products for ``supermarket_id``.
    """
    if not ingredients or not supermarket_id or not supermarket_id.strip():
        raise ValidationError()

    supermarket = supermarket_id.strip().lower()
    products = catalog.get_products(supermarket)
    if not products:
        raise NotFoundError()

    matched = match_products(supermarket, ingredients, products)
    placeholders = sum(1 for p in matched if p.match_score == PLACEHOLDER_SCORE)
    logger.info(
        f"Matched {len(matched) - placeholders}/{len(matched)} ingredients for {supermarket}"
    )
    return matched
