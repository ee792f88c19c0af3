"""
EntityStore - local mirror of the remote store (one store/tenant at a time).

The mirror is a cache, never a source of truth: it is filled by bulk listing
on init(), cleared on teardown(), and otherwise only written by folds of
results the remote store already accepted.
"""
import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional

from possync.exceptions import NotFoundError
from possync.models import (
    MIRRORED_MODELS, Product, ProductVariant, StockBatch, Sale, SaleItem,
    Return, ReturnItem, Purchase, PurchaseItem, Customer, Supplier,
    Category, User, Expense
)

logger = logging.getLogger(__name__)

# Line tables have no remote table of their own; they are cleared before their parents
_LINE_MODELS = (SaleItem, ReturnItem, PurchaseItem)


class EntityStore:
    """Keyed collections per entity kind, backed by a SQLAlchemy session."""

    def __init__(self, session_factory, gateway=None):
        self.session = session_factory()
        self.gateway = gateway
        self.store_id: Optional[str] = None
        self._revisions = {model: 0 for model in MIRRORED_MODELS}

    # =====================================================
    # LIFECYCLE
    # =====================================================

    @property
    def is_ready(self) -> bool:
        return self.store_id is not None

    def init(self, store_id: str) -> None:
        """
        Load every entity kind of a store from the remote gateway.

        Nothing is written locally until every list call succeeded, so a
        failing login leaves an empty mirror rather than a partial one.
        """
        if not store_id:
            raise ValueError('store_id is required')
        if self.gateway is None:
            raise RuntimeError('EntityStore has no gateway')

        self.teardown()
        logger.info(f"[MIRROR] Loading store {store_id}")

        loaded = {}
        for model in MIRRORED_MODELS:
            rows = self.gateway.list(model.__wire_table__, store_id)
            loaded[model] = [model.from_dict(row) for row in rows]

        with self.fold():
            for model, records in loaded.items():
                self.upsert_many(records)
                logger.debug(f"[MIRROR] {model.__wire_table__}: {len(records)} records")

        self.store_id = store_id
        logger.info(f"[MIRROR] Store {store_id} ready")

    def teardown(self) -> None:
        """Clear every collection (logout). No partial eviction."""
        for model in _LINE_MODELS + MIRRORED_MODELS:
            self.session.query(model).delete(synchronize_session=False)
        self.session.commit()
        self.session.expunge_all()

        if self.store_id is not None:
            logger.info(f"[MIRROR] Store {self.store_id} cleared")
        self.store_id = None
        for model in MIRRORED_MODELS:
            self._touch(model)

    def accepts(self, store_id: Optional[str]) -> bool:
        """True when a remote result belongs to the store currently mirrored."""
        return self.store_id is not None and store_id == self.store_id

    # =====================================================
    # WRITES (folds only)
    # =====================================================

    @contextmanager
    def fold(self):
        """Group mirror writes in one local transaction."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def upsert(self, entity):
        """Insert or replace by id. Applying the same record twice is a no-op."""
        merged = self.session.merge(entity)
        self._touch(type(entity))
        return merged

    def upsert_many(self, entities: Iterable) -> List:
        return [self.upsert(entity) for entity in entities]

    def remove(self, model, record_id: str) -> bool:
        entity = self.session.get(model, record_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self._touch(model)
        return True

    def remove_where(self, model, **filters) -> int:
        entities = self.session.query(model).filter_by(**filters).all()
        for entity in entities:
            self.session.delete(entity)
        if entities:
            self._touch(model)
        return len(entities)

    # =====================================================
    # READS
    # =====================================================

    def list(self, model, order_by=None, **filters) -> List:
        query = self.session.query(model).filter_by(**filters)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.all()

    def get(self, model, record_id: Optional[str]):
        if not record_id:
            return None
        return self.session.get(model, record_id)

    def get_or_404(self, model, record_id: Optional[str]):
        entity = self.get(model, record_id)
        if entity is None:
            raise NotFoundError(f'{model.__name__} {record_id} not found')
        return entity

    def variants_for_product(self, product_id: str) -> List[ProductVariant]:
        return self.list(ProductVariant, product_id=product_id)

    def variant_by_barcode(self, barcode: str) -> Optional[ProductVariant]:
        if not barcode:
            return None
        return self.session.query(ProductVariant).filter_by(barcode=barcode).first()

    def revision(self, model) -> int:
        return self._revisions[model]

    def revisions(self, *models) -> tuple:
        return tuple(self._revisions[model] for model in models)

    def _touch(self, model) -> None:
        if model in self._revisions:
            self._revisions[model] += 1

    # Read access for the UI layer
    @property
    def products(self):
        return self.list(Product)

    @property
    def variants(self):
        return self.list(ProductVariant)

    @property
    def stock_batches(self):
        return self.list(StockBatch)

    @property
    def sales(self):
        return self.list(Sale, order_by=Sale.date)

    @property
    def returns(self):
        return self.list(Return, order_by=Return.date)

    @property
    def purchases(self):
        return self.list(Purchase, order_by=Purchase.date)

    @property
    def customers(self):
        return self.list(Customer)

    @property
    def suppliers(self):
        return self.list(Supplier)

    @property
    def categories(self):
        return self.list(Category)

    @property
    def users(self):
        return self.list(User)

    @property
    def expenses(self):
        return self.list(Expense, order_by=Expense.date)
