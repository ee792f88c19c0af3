"""
Remote gateway contract.

The remote store is the source of truth. Every method either returns the
confirmed wire records (camelCase dicts, ids assigned server-side) or raises
RemoteFailure. Compound endpoints are expected to be atomic on the server.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class RemoteGateway(ABC):
    """Authoritative store consumed by the EntityStore and the coordinator."""

    # --- Generic per-table CRUD -------------------------------------------

    @abstractmethod
    def list(self, table: str, store_id: str) -> List[Dict[str, Any]]:
        """Return every record of a table for one store."""

    @abstractmethod
    def create(self, table: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert a record and return it with its server id (may return None)."""

    @abstractmethod
    def update(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update a record by id and return the stored version."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Delete a record by id."""

    @abstractmethod
    def delete_for_store(self, table: str, store_id: str) -> None:
        """Delete every record of a table for one store."""

    # --- Compound endpoints -----------------------------------------------

    @abstractmethod
    def complete_sale(self, sale: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a sale; returns the sale."""

    @abstractmethod
    def process_return(self, sale_return: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a return; returns the return."""

    @abstractmethod
    def add_stock(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Returns {'purchase', 'stockBatch', 'variant'}."""

    @abstractmethod
    def add_purchase(self, purchase: Dict[str, Any]) -> Dict[str, Any]:
        """Returns {'purchase', 'stockBatches'}."""

    @abstractmethod
    def pay_customer_debt(self, payment_sale: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a debt payment sale; returns the sale."""

    @abstractmethod
    def pay_supplier_debt(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Returns {'purchases'} with the updated purchases."""

    @abstractmethod
    def add_product_with_variants(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Returns {'product', 'variants', 'stockBatches'}."""

    @abstractmethod
    def update_product_with_variants(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Returns {'product', 'updatedVariants', 'newVariants', 'deletedVariantIds', 'newStockBatches'}."""
