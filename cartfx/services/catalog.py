"""Product search: trie-backed autocomplete, substring filter, stable sorting.

Names are lower-cased before they go into the trie, so suggestions come back
lower-cased; callers map them to products through the payload ids.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from cartfx.core.errors import InvalidArgument
from cartfx.models.constants import SORT_OPTIONS
from cartfx.models.product import PricedProduct, Product
from cartfx.services.rates.conversion import ConversionEngine
from cartfx.structures.sorting import merge_sort
from cartfx.structures.trie import Suggestion, Trie

logger = logging.getLogger("cartfx.catalog")

DEFAULT_SUGGEST_LIMIT = 5


def _by_price(a: Product, b: Product) -> int:
    if a.price_base < b.price_base:
        return -1
    if a.price_base > b.price_base:
        return 1
    return 0


def _by_name(a: Product, b: Product) -> int:
    x, y = a.name.casefold(), b.name.casefold()
    return (x > y) - (x < y)


_COMPARATORS: Dict[str, Callable[[Product, Product], int]] = {
    "price-asc": _by_price,
    "price-desc": lambda a, b: _by_price(b, a),
    "name-asc": _by_name,
    "name-desc": lambda a, b: _by_name(b, a),
}


def sort_products(products: Sequence[Product], sort_by: Optional[str]) -> List[Product]:
    """Stable sort by one of SORT_OPTIONS; None keeps input order (as a copy)."""
    if sort_by is None:
        return list(products)
    cmp = _COMPARATORS.get(sort_by)
    if cmp is None:
        raise InvalidArgument(
            f"unknown sort '{sort_by}', expected one of {sorted(SORT_OPTIONS)}"
        )
    return merge_sort(products, cmp)


class ProductCatalog:
    def __init__(self, products: Iterable[Product]):
        self._products: Dict[str, Product] = {}
        self._trie = Trie()
        for p in products:
            self._products[p.id] = p
            self._trie.insert(p.name.lower(), p.id)

    @property
    def products(self) -> List[Product]:
        return list(self._products.values())

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def suggest(self, query: str, limit: int = DEFAULT_SUGGEST_LIMIT) -> List[Suggestion]:
        q = query.strip().lower()
        if not q:
            return []
        return self._trie.suggest(q, limit)

    def search(self, query: Optional[str]) -> List[Product]:
        q = (query or "").strip().lower()
        if not q:
            return self.products
        return [
            p
            for p in self._products.values()
            if q in p.name.lower() or q in p.description.lower()
        ]

    async def priced_listing(
        self,
        engine: ConversionEngine,
        currency: str,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[PricedProduct]:
        """Search, sort on base price/name, then price every hit in `currency`."""
        rows = sort_products(self.search(query), sort_by)
        quotes = await asyncio.gather(
            *(engine.quote(p.price_base, p.currency_base, currency) for p in rows)
        )
        if any(q.degraded for q in quotes):
            logger.info("listing priced with degraded rates", extra={"currency": currency})
        return [
            PricedProduct(
                **p.model_dump(),
                price=q.converted,
                currency=q.to_currency,
                price_source=q.source,
            )
            for p, q in zip(rows, quotes)
        ]
