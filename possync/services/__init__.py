"""Services package - ledgers, cart and transactional operations."""
from possync.services.pricing import PriceTier, price_for
from possync.services.stock_ledger import StockLedger, compute_stock_map
from possync.services.debt_ledger import DebtLedger
from possync.services.cart import CartAggregate, CartItem
from possync.services.transaction_service import TransactionCoordinator, PrintIntent, PrintMode

__all__ = [
    'PriceTier', 'price_for', 'StockLedger', 'compute_stock_map', 'DebtLedger',
    'CartAggregate', 'CartItem', 'TransactionCoordinator', 'PrintIntent', 'PrintMode',
]
