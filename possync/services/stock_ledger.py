"""
Stock ledger - on-hand quantity derived from append-only logs.

Stock is never stored. It is the fold of three collections:
    + stock batch quantity
    - sold quantity of GOOD lines
    + returned quantity of GOOD lines
The fold is commutative, so the order of the collections does not matter.
Service and custom lines never move stock.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List

from possync.models import LineKind, ProductVariant, StockBatch, Sale, Return


def _good_lines(documents):
    for document in documents:
        for item in document.items or ():
            if item.kind is LineKind.GOOD:
                yield item


def compute_stock_map(batches: Iterable, sales: Iterable, returns: Iterable) -> Dict[str, Decimal]:
    """Return {variant_id: on-hand quantity} in one pass over the three logs."""
    stock = defaultdict(lambda: Decimal('0'))

    for batch in batches:
        stock[batch.variant_id] += batch.quantity
    for item in _good_lines(sales):
        stock[item.line_id] -= item.quantity
    for item in _good_lines(returns):
        stock[item.line_id] += item.quantity

    return dict(stock)


def compute_stock(variant_id: str, batches: Iterable, sales: Iterable, returns: Iterable) -> Decimal:
    return compute_stock_map(batches, sales, returns).get(variant_id, Decimal('0'))


def is_low_stock(variant, stock: Decimal) -> bool:
    """Low stock when on-hand is at or below the variant threshold."""
    return stock <= (variant.low_stock_threshold or Decimal('0'))


def low_stock_variants(variants: Iterable, stock_map: Dict[str, Decimal]) -> List:
    return [
        variant for variant in variants
        if is_low_stock(variant, stock_map.get(variant.id, Decimal('0')))
    ]


class StockLedger:
    """
    Stock view over an EntityStore.

    The map is rebuilt from scratch whenever batches, sales or returns change
    (tracked through the store revisions), never patched incrementally.
    """

    _SOURCES = (StockBatch, Sale, Return)

    def __init__(self, store):
        self.store = store
        self._key = None
        self._stock_map: Dict[str, Decimal] = {}

    @property
    def stock_map(self) -> Dict[str, Decimal]:
        key = self.store.revisions(*self._SOURCES)
        if key != self._key:
            self._stock_map = compute_stock_map(
                self.store.stock_batches, self.store.sales, self.store.returns
            )
            self._key = key
        return self._stock_map

    def stock(self, variant_id: str) -> Decimal:
        return self.stock_map.get(variant_id, Decimal('0'))

    def is_low(self, variant: ProductVariant) -> bool:
        return is_low_stock(variant, self.stock(variant.id))

    def low_stock_variants(self) -> List[ProductVariant]:
        return low_stock_variants(self.store.variants, self.stock_map)
