"""
PosClient - the object the UI layer talks to.

Owns the mirror lifecycle (login/logout), the cart, the derived views and the
transactional operations of one signed-in user.
"""
import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from possync.exceptions import NotFoundError, ValidationError
from possync.models import Product, ProductVariant
from possync.services import directory_service, report_service
from possync.services.cart import CartAggregate, CartItem
from possync.services.debt_ledger import DebtLedger, rank_debts
from possync.services.pricing import PriceTier, price_for
from possync.services.stock_ledger import StockLedger
from possync.services.transaction_service import TransactionCoordinator, PrintIntent, PrintMode
from possync.store import EntityStore

logger = logging.getLogger(__name__)


class PosClient:
    """Facade over the EntityStore, the ledgers, the cart and the coordinator."""

    def __init__(self, store: EntityStore, gateway, config: Optional[dict] = None,
                 on_print: Optional[Callable[[PrintIntent], None]] = None, engine=None):
        self.config = dict(config or {})
        self.engine = engine
        self.store = store
        self.gateway = gateway
        self.cart = CartAggregate()
        self.stock = StockLedger(store)
        self.debts = DebtLedger(store)
        self.currency_symbol = self.config.get('CURRENCY_SYMBOL', 'DH')
        self.transactions = TransactionCoordinator(
            store, gateway, self.cart, self.stock, self.debts,
            on_print=on_print,
            default_low_stock_threshold=self.config.get('LOW_STOCK_THRESHOLD', 0),
            currency_symbol=self.currency_symbol,
        )

    # =====================================================
    # SESSION LIFECYCLE
    # =====================================================

    @property
    def user_id(self) -> Optional[str]:
        return self.transactions.user_id

    @property
    def store_id(self) -> Optional[str]:
        return self.store.store_id

    def login(self, store_id: str, user_id: str) -> None:
        """Load the store mirror for a signed-in user. A failing load leaves the client logged out."""
        self.logout()
        self.store.init(store_id)
        self.transactions.user_id = user_id
        logger.info(f"[SESSION] User {user_id} logged in to store {store_id}")

    def logout(self) -> None:
        previous = self.store.store_id
        self.cart.clear()
        self.cart.set_return_mode(False)
        self.transactions.user_id = None
        self.store.teardown()
        if previous:
            logger.info(f"[SESSION] Logged out of store {previous}")

    def on_print(self, sink: Optional[Callable[[PrintIntent], None]]) -> None:
        self.transactions.on_print = sink

    # =====================================================
    # DERIVED VIEWS
    # =====================================================

    @property
    def stock_map(self) -> Dict[str, Decimal]:
        return self.stock.stock_map

    def stock_of(self, variant_id: str) -> Decimal:
        return self.stock.stock(variant_id)

    def low_stock_variants(self) -> List[ProductVariant]:
        return self.stock.low_stock_variants()

    @property
    def debt_by_customer(self) -> Dict[str, Decimal]:
        return self.debts.by_customer

    @property
    def debt_by_supplier(self) -> Dict[str, Decimal]:
        return self.debts.by_supplier

    def ranked_customer_debts(self):
        return rank_debts(self.debts.by_customer)

    def ranked_supplier_debts(self):
        return rank_debts(self.debts.by_supplier)

    def price_for(self, item, tier: Optional[PriceTier] = None) -> Decimal:
        return price_for(item, tier or self.cart.price_tier)

    def finance_summary(self, date_range='all', start=None, end=None, now=None):
        return report_service.finance_summary(
            self.store.sales, self.store.returns, self.store.expenses, self.store.purchases,
            date_range=date_range, start=start, end=end, now=now
        )

    def top_selling_variants(self, limit: int = 6):
        return report_service.top_selling_variants(self.store.sales, self.store.returns, limit=limit)

    def seller_report(self, user_id: Optional[str] = None):
        """Activity of one seller; all sellers when user_id is None."""
        return report_service.seller_report(self.store.sales, self.store.returns, user_id=user_id)

    # =====================================================
    # CART
    # =====================================================

    def add_variant_to_cart(self, variant_id: str) -> CartItem:
        variant = self.store.get_or_404(ProductVariant, variant_id)
        product = self.store.get(Product, variant.product_id)
        return self.cart.add_variant(variant, product, self.stock.stock(variant.id))

    def add_barcode_to_cart(self, barcode: str) -> CartItem:
        """Scanner entry point."""
        variant = self.store.variant_by_barcode((barcode or '').strip())
        if variant is None:
            raise NotFoundError(f'No variant with barcode {barcode}')
        return self.add_variant_to_cart(variant.id)

    def add_service_to_cart(self, product_id: str) -> CartItem:
        product = self.store.get_or_404(Product, product_id)
        if not product.is_service:
            raise ValidationError(f'{product.name} is sold through its variants')
        return self.cart.add_service(product)

    def add_custom_item_to_cart(self, name: str, price, quantity=Decimal('1')) -> CartItem:
        return self.cart.add_custom_item(name, price, quantity, store_id=self.store.store_id)

    def set_price_tier(self, tier: PriceTier) -> None:
        self.cart.set_price_tier(
            tier,
            get_variant=lambda variant_id: self.store.get(ProductVariant, variant_id),
            get_product=lambda product_id: self.store.get(Product, product_id),
        )

    def set_return_mode(self, enabled: bool) -> None:
        self.cart.set_return_mode(enabled)

    # =====================================================
    # TRANSACTIONS
    # =====================================================

    def complete_sale(self, down_payment, final_total, customer_id=None, print_mode=PrintMode.INVOICE):
        return self.transactions.complete_sale(down_payment, final_total, customer_id, print_mode)

    def process_return(self, items=None, sale_id=None):
        return self.transactions.process_return(items, sale_id)

    def add_stock(self, intake):
        return self.transactions.add_stock(intake)

    def add_purchase(self, supplier_id, lines, amount_paid, payment_method='cash', reference=None):
        return self.transactions.add_purchase(supplier_id, lines, amount_paid, payment_method, reference)

    def pay_customer_debt(self, customer_id, amount):
        return self.transactions.pay_customer_debt(customer_id, amount)

    def pay_supplier_debt(self, supplier_id, amount):
        return self.transactions.pay_supplier_debt(supplier_id, amount)

    def upsert_product_with_variants(self, product, variants=()):
        return self.transactions.upsert_product_with_variants(product, variants)

    def delete_product(self, product_id):
        return self.transactions.delete_product(product_id)

    # =====================================================
    # DIRECTORY
    # =====================================================

    def add_customer(self, name, phone=None, email=None):
        return directory_service.add_customer(self.store, self.gateway, name, phone, email)

    def delete_customer(self, customer_id):
        directory_service.delete_customer(self.store, self.gateway, self.debts, customer_id, self.currency_symbol)

    def add_supplier(self, name, phone=None, email=None):
        return directory_service.add_supplier(self.store, self.gateway, name, phone, email)

    def delete_supplier(self, supplier_id):
        directory_service.delete_supplier(self.store, self.gateway, self.debts, supplier_id, self.currency_symbol)

    def add_category(self, name):
        return directory_service.add_category(self.store, self.gateway, name)

    def update_category(self, category_id, name):
        return directory_service.update_category(self.store, self.gateway, category_id, name)

    def delete_category(self, category_id):
        directory_service.delete_category(self.store, self.gateway, category_id)

    def add_expense(self, description, amount, date=None):
        return directory_service.add_expense(self.store, self.gateway, description, amount, date)

    def update_expense(self, expense_id, description, amount, date=None):
        return directory_service.update_expense(self.store, self.gateway, expense_id, description, amount, date)

    def delete_expense(self, expense_id):
        directory_service.delete_expense(self.store, self.gateway, expense_id)

    def delete_return(self, return_id):
        directory_service.delete_return(self.store, self.gateway, return_id)

    def delete_all_returns(self):
        return directory_service.delete_all_returns(self.store, self.gateway)
