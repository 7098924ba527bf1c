"""
Client for TheCocktailDB public API, used to find pictures for cocktails that
have no stored image.

    search_cocktails("Margarita")   -> list of drink dicts
    find_cocktail_image("Rum & Coke") -> "https://.../drink.jpg" or None
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from core.config import settings

logger = logging.getLogger(__name__)


class CocktailDBError(RuntimeError):
    pass


def search_cocktails(term: str, *, base_url: str | None = None, timeout: float | None = None) -> List[Dict[str, Any]]:
    """Drinks matching `term`; an empty list when nothing matches."""
    url = f"{(base_url or settings.cocktaildb_base_url).rstrip('/')}/search.php"
    try:
        resp = requests.get(
            url,
            params={"s": term},
            headers={"Accept": "application/json"},
            timeout=timeout or settings.cocktaildb_timeout,
        )
    except requests.RequestException as e:
        raise CocktailDBError(f"Search for {term!r} failed: {e}") from e

    if resp.status_code >= 400:
        raise CocktailDBError(f"Search for {term!r} failed ({resp.status_code}): {resp.text}")
    try:
        data = resp.json()
    except ValueError as e:
        raise CocktailDBError(f"Search for {term!r} returned invalid JSON") from e

    # The API answers {"drinks": null} (or "no data found") when nothing matches
    drinks = data.get("drinks") if isinstance(data, dict) else None
    if not isinstance(drinks, list):
        return []
    return drinks


def search_terms(name: str) -> List[str]:
    """Name variations to try, most specific first."""
    name = (name or "").strip()
    terms = [
        name.replace("&", "and").strip(),
        " ".join(name.replace("&", " ").split()),
    ]
    if name:
        terms.append(name.split()[0])

    seen = set()
    unique = []
    for t in terms:
        if t and t.lower() not in seen:
            seen.add(t.lower())
            unique.append(t)
    return unique


def best_match(drinks: List[Dict[str, Any]], term: str) -> Optional[Dict[str, Any]]:
    if not drinks:
        return None
    term_lower = term.lower()
    for drink in drinks:
        if term_lower in (drink.get("strDrink") or "").lower():
            return drink
    return drinks[0]


def lookup_cocktail_image(name: str, **kwargs) -> Optional[str]:
    """Thumbnail URL for the best matching drink, or None. Raises CocktailDBError."""
    for term in search_terms(name):
        drinks = search_cocktails(term, **kwargs)
        if drinks:
            drink = best_match(drinks, term)
            logger.debug("Image lookup %r matched %r", name, drink.get("strDrink"))
            return drink.get("strDrinkThumb") or None

    logger.info("No image found for %r", name)
    return None


def find_cocktail_image(name: str, **kwargs) -> Optional[str]:
    """Same as lookup_cocktail_image, but upstream failures are logged and give None."""
    try:
        return lookup_cocktail_image(name, **kwargs)
    except CocktailDBError as e:
        logger.warning("Image lookup for %r failed: %s", name, e)
        return None
