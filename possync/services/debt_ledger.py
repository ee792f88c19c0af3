"""
Debt ledger - customer and supplier balances derived from sales and purchases.

Balances are never stored on Customer or Supplier rows.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from possync.models import Sale, Purchase


def customer_debts(sales: Iterable) -> Dict[str, Decimal]:
    """
    Outstanding balance per customer.

    Credit sales contribute their positive remaining_amount. Debt payment
    records (zero total, negative remaining_amount) subtract the amount paid.
    """
    debts = defaultdict(lambda: Decimal('0'))
    for sale in sales:
        if not sale.customer_id:
            continue
        remaining = sale.remaining_amount or Decimal('0')
        if remaining > 0 or sale.is_debt_payment:
            debts[sale.customer_id] += remaining
    return dict(debts)


def supplier_debts(purchases: Iterable) -> Dict[str, Decimal]:
    """Outstanding balance per supplier: sum of positive remaining_amount."""
    debts = defaultdict(lambda: Decimal('0'))
    for purchase in purchases:
        remaining = purchase.remaining_amount or Decimal('0')
        if purchase.supplier_id and remaining > 0:
            debts[purchase.supplier_id] += remaining
    return dict(debts)


def rank_debts(debts: Dict[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """Sort (party_id, debt) pairs by debt, largest first; zero balances dropped."""
    return sorted(
        ((party_id, debt) for party_id, debt in debts.items() if debt != 0),
        key=lambda pair: pair[1],
        reverse=True
    )


class DebtLedger:
    """Debt views over an EntityStore, memoized on the source collection revisions."""

    def __init__(self, store):
        self.store = store
        self._customer_key = None
        self._customer_debts: Dict[str, Decimal] = {}
        self._supplier_key = None
        self._supplier_debts: Dict[str, Decimal] = {}

    @property
    def by_customer(self) -> Dict[str, Decimal]:
        key = self.store.revision(Sale)
        if key != self._customer_key:
            self._customer_debts = customer_debts(self.store.sales)
            self._customer_key = key
        return self._customer_debts

    @property
    def by_supplier(self) -> Dict[str, Decimal]:
        key = self.store.revision(Purchase)
        if key != self._supplier_key:
            self._supplier_debts = supplier_debts(self.store.purchases)
            self._supplier_key = key
        return self._supplier_debts

    def customer_debt(self, customer_id: str) -> Decimal:
        return self.by_customer.get(customer_id, Decimal('0'))

    def supplier_debt(self, supplier_id: str) -> Decimal:
        return self.by_supplier.get(supplier_id, Decimal('0'))
