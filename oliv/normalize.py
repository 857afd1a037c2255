import re
from types import MappingProxyType
from typing import Tuple

# Canonical ingredient name (lowercase) -> supermarket search terms
SYNONYMS = MappingProxyType({
    # meat and protein
    "pechuga de pollo": ("pollo", "pechuga", "chicken"),
    "pollo": ("pollo", "chicken", "pechuga"),
    "carne": ("carne", "ternera", "beef"),
    "pescado": ("pescado", "fish", "merluza", "salmón"),
    "salmón": ("salmón", "salmon"),
    # dairy
    "leche": ("leche", "milk"),
    "leche descremada": ("leche desnatada", "leche 0%", "leche sin grasa"),
    "queso feta": ("queso feta", "feta", "queso griego"),
    "queso": ("queso", "cheese"),
    "yogur": ("yogur", "yogurt"),
    # cereals and grains
    "avena": ("avena", "oats", "cereales"),
    "avena rápida": ("avena", "copos de avena"),
    "quinoa": ("quinoa", "grano quinoa"),
    "arroz": ("arroz", "rice"),
    # fruit
    "manzana": ("manzana", "apple"),
    "manzana roja": ("manzana roja", "manzana royal gala"),
    "tomate": ("tomate", "tomato"),
    "tomate cherry": ("tomate cherry", "tomates cherry"),
    "aguacate": ("aguacate", "avocado"),
    # vegetables
    "espinaca": ("espinaca", "espinacas", "spinach"),
    "pepino": ("pepino", "cucumber"),
    "aceitunas": ("aceitunas", "olivas"),
    "aceitunas negras": ("aceitunas negras", "olivas negras"),
    # oils and seasoning
    "aceite de oliva": ("aceite oliva", "aceite de oliva virgen"),
    "aceite de oliva virgen extra": ("aceite oliva virgen extra", "aove"),
    "sal": ("sal", "salt"),
    "pimienta": ("pimienta", "pepper"),
    "canela": ("canela", "cinnamon"),
    "miel": ("miel", "honey"),
    # nuts
    "nueces": ("nueces", "nuts", "walnut"),
    "almendras": ("almendras", "almonds"),
    # eggs
    "huevo": ("huevo", "huevos", "egg"),
    "huevos": ("huevos", "egg"),
})


def normalize_ingredient(s: str) -> str:
    if not s:
        return ""
    return s.strip().lower()


def search_terms(name: str) -> Tuple[str, ...]:
    """Return the synonym search terms for an ingredient name.

    Lookup uses the lowercase name. Names missing from ``SYNONYMS`` search
    for themselves only.
    """
    key = name.lower()
    return SYNONYMS.get(key, (key,))


def similarity(a: str, b: str) -> float:
    """Score how well ``a`` matches ``b`` in ``[0, 1]``.

    1.0 for equal strings and 0.9 when one contains the other (both after
    trim/lowercase). Otherwise the share of whitespace tokens of ``a`` that
    equal, contain or are contained in some token of ``b``, over the larger
    token count.
    """
    s1 = a.lower().strip()
    s2 = b.lower().strip()

    if s1 == s2:
        return 1.0
    if s1 in s2 or s2 in s1:
        return 0.9

    words1 = s1.split()
    words2 = s2.split()
    matching = 0
    for w1 in words1:
        if any(w1 in w2 or w2 in w1 for w2 in words2):
            matching += 1
    return matching / max(len(words1), len(words2))


def slugify(s: str) -> str:
    slug = re.sub(r"[^\w]+", "-", s.strip().lower())
    return slug.strip("-")
