"""Models package - exports all mirror models."""
from possync.models.line_item import LineKind
from possync.models.category import Category
from possync.models.product import Product, ProductType
from possync.models.product_variant import ProductVariant
from possync.models.stock_batch import StockBatch
from possync.models.sale import Sale
from possync.models.sale_item import SaleItem
from possync.models.sale_return import Return
from possync.models.return_item import ReturnItem
from possync.models.purchase import Purchase
from possync.models.purchase_item import PurchaseItem
from possync.models.customer import Customer
from possync.models.supplier import Supplier
from possync.models.app_user import User
from possync.models.expense import Expense

# Top-level collections mirrored from the remote store, loaded in this order
MIRRORED_MODELS = (
    Product, ProductVariant, StockBatch, Sale, Return, Purchase,
    Customer, Supplier, Category, User, Expense,
)

__all__ = [
    'LineKind', 'Category', 'Product', 'ProductType', 'ProductVariant', 'StockBatch',
    'Sale', 'SaleItem', 'Return', 'ReturnItem', 'Purchase', 'PurchaseItem',
    'Customer', 'Supplier', 'User', 'Expense', 'MIRRORED_MODELS',
]
