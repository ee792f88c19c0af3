"""
Transaction service - compound operations against the remote store.

Every operation follows the same three steps:
    1. validate locally (ValidationError / NotFoundError, nothing is sent)
    2. one compound call to the remote store, which commits atomically
    3. fold the confirmed records into the local mirror in one transaction

A remote failure propagates as RemoteFailure and leaves the mirror untouched.
Nothing is retried.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from possync.exceptions import ValidationError, NotFoundError
from possync.forms import ProductForm, VariantForm, StockIntake, PurchaseLineForm, parse_amount
from possync.models import (
    LineKind, Product, ProductType, ProductVariant, StockBatch, Sale, Return,
    Purchase, Customer, Supplier
)
from possync.models.wire import to_wire
from possync.services.cart import CartAggregate, CartItem
from possync.utils.formatters import format_money

logger = logging.getLogger(__name__)

STOCK_ADJUSTMENT_REFERENCE = 'purchase_ref_stock_adjustment'


class PrintMode(str, enum.Enum):
    """Document the print sink is asked to render."""
    INVOICE = 'invoice'
    ORDER_FORM = 'orderForm'
    RETURN_RECEIPT = 'returnReceipt'


@dataclass
class PrintIntent:
    mode: PrintMode
    record: Any


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =====================================================
# PURE CALCULATIONS
# =====================================================

def calculate_sale_profit(items: Iterable[CartItem]) -> Decimal:
    """
    Profit of a sale: (price - purchase_price) * quantity per line.

    Custom lines have no cost basis and are left out; a missing purchase
    price counts as 0.
    """
    profit = Decimal('0')
    for item in items:
        if item.kind is LineKind.CUSTOM:
            continue
        cost = item.purchase_price or Decimal('0')
        profit += (item.price - cost) * item.quantity
    return profit


def calculate_return_totals(items: Iterable[CartItem]) -> Tuple[Decimal, Decimal]:
    """
    Returns (refund_amount, profit_lost).

    The refund covers every line; profit lost only counts goods whose
    purchase price is known.
    """
    refund = Decimal('0')
    profit_lost = Decimal('0')
    for item in items:
        refund += item.price * item.quantity
        if item.kind is LineKind.GOOD and item.purchase_price is not None:
            profit_lost += (item.price - item.purchase_price) * item.quantity
    return refund, profit_lost


def diff_variants(existing: Sequence[ProductVariant], forms: Sequence[VariantForm]):
    """
    Split the submitted variant rows against the mirrored ones.

    Returns:
        (updated, inserted, deleted_ids): forms whose id is mirrored, forms
        without a known id, and mirrored ids no longer submitted
    """
    existing_ids = {variant.id for variant in existing}
    updated = [form for form in forms if form.id and form.id in existing_ids]
    inserted = [form for form in forms if not form.id or form.id not in existing_ids]
    submitted_ids = {form.id for form in updated}
    deleted_ids = [variant.id for variant in existing if variant.id not in submitted_ids]
    return updated, inserted, deleted_ids


def allocate_payment(purchases: Sequence[Purchase], amount: Decimal) -> List[Dict[str, Any]]:
    """
    Spread a supplier payment over open purchases, oldest first.

    Returns the wire updates {id, amountPaid, remainingAmount} of the
    purchases the payment touches.
    """
    updates = []
    left = amount
    for purchase in purchases:
        if left <= 0:
            break
        remaining = purchase.remaining_amount or Decimal('0')
        if remaining <= 0:
            continue
        paid_now = min(left, remaining)
        left -= paid_now
        updates.append({
            'id': purchase.id,
            'amountPaid': to_wire((purchase.amount_paid or Decimal('0')) + paid_now),
            'remainingAmount': to_wire(remaining - paid_now),
        })
    return updates


class TransactionCoordinator:
    """Runs compound operations for the signed-in user of the active store."""

    def __init__(self, store, gateway, cart: CartAggregate, stock, debts,
                 on_print: Optional[Callable[[PrintIntent], None]] = None,
                 default_low_stock_threshold=0, currency_symbol: str = 'DH'):
        self.store = store
        self.gateway = gateway
        self.cart = cart
        self.stock = stock
        self.debts = debts
        self.on_print = on_print
        self.default_low_stock_threshold = Decimal(str(default_low_stock_threshold))
        self.currency_symbol = currency_symbol
        self.user_id: Optional[str] = None

    # =====================================================
    # PLUMBING
    # =====================================================

    def _require_store(self) -> str:
        if not self.store.is_ready:
            raise ValidationError('No store is loaded; log in first')
        return self.store.store_id

    def _fold(self, store_id: str, apply: Callable[[], Any]):
        """
        Apply confirmed records to the mirror in one local transaction.

        Results for a store that is no longer active (logout or store switch
        while the call was in flight) are dropped.
        """
        if not self.store.accepts(store_id):
            logger.warning(
                f"[SYNC] Dropping result for store {store_id}; active store is {self.store.store_id}"
            )
            return None
        with self.store.fold():
            return apply()

    def _emit_print(self, mode: PrintMode, record) -> None:
        if self.on_print is None or record is None:
            return
        try:
            self.on_print(PrintIntent(mode=mode, record=record))
        except Exception as e:
            # The sale is already committed remotely and folded
            logger.error(f"[PRINT] {mode.value} failed for {getattr(record, 'id', None)}: {e}")

    # =====================================================
    # SALES AND RETURNS
    # =====================================================

    def complete_sale(self, down_payment, final_total, customer_id: Optional[str] = None,
                      print_mode: PrintMode = PrintMode.INVOICE) -> Optional[Sale]:
        """
        Confirm the current cart as a sale.

        Args:
            down_payment: Amount paid now
            final_total: Total charged (may differ from the cart subtotal)
            customer_id: Required when part of the total stays on credit
            print_mode: Document requested from the print sink

        Returns:
            The confirmed Sale as folded in the mirror

        Raises:
            ValidationError: Cart in return mode, empty cart, non-numeric or
                negative amounts, down payment above the total, or credit
                sale without a customer
            NotFoundError: Unknown customer
            RemoteFailure: The remote store rejected the sale
        """
        store_id = self._require_store()
        items = self.cart.items

        # 1. Validate
        if self.cart.return_mode:
            raise ValidationError('The cart is in return mode; process it as a return')
        if not items:
            raise ValidationError('The cart is empty')

        down_payment = parse_amount(down_payment, 'Down payment')
        final_total = parse_amount(final_total, 'Total')
        if down_payment < 0 or final_total < 0:
            raise ValidationError('Amounts cannot be negative')
        if down_payment > final_total:
            raise ValidationError('Down payment cannot exceed the total')

        remaining = final_total - down_payment
        if remaining > 0 and not customer_id:
            raise ValidationError('A customer is required for a credit sale')
        if customer_id:
            self.store.get_or_404(Customer, customer_id)

        subtotal = self.cart.subtotal
        discount = subtotal - final_total if subtotal > final_total else Decimal('0')

        # 2. Remote commit
        payload = {
            'storeId': store_id,
            'userId': self.user_id,
            'customerId': customer_id,
            'date': _now_iso(),
            'items': [item.to_line() for item in items],
            'total': to_wire(final_total),
            'discount': to_wire(discount),
            'downPayment': to_wire(down_payment),
            'remainingAmount': to_wire(remaining),
            'profit': to_wire(calculate_sale_profit(items)),
        }
        logger.info(f"[SALE] Completing sale: {len(items)} lines, total {final_total}, remaining {remaining}")
        result = self.gateway.complete_sale(payload)

        # 3. Fold
        sale = self._fold(store_id, lambda: self.store.upsert(Sale.from_dict(result)))
        self.cart.clear()
        logger.info(f"[SALE] Sale {result.get('id')} confirmed")

        self._emit_print(PrintMode(print_mode), sale)
        return sale

    def process_return(self, items: Optional[Sequence[CartItem]] = None,
                       sale_id: Optional[str] = None) -> Optional[Return]:
        """
        Record returned lines. Defaults to the cart lines (cart in return mode).

        Returned goods go back into stock through the derived stock fold.
        """
        store_id = self._require_store()
        from_cart = items is None
        if from_cart and not self.cart.return_mode:
            raise ValidationError('The cart is in sale mode; switch to return mode first')
        items = self.cart.items if from_cart else list(items)

        if not items:
            raise ValidationError('Nothing to return')

        refund, profit_lost = calculate_return_totals(items)
        payload = {
            'storeId': store_id,
            'userId': self.user_id,
            'saleId': sale_id,
            'date': _now_iso(),
            'items': [item.to_line() for item in items],
            'refundAmount': to_wire(refund),
            'profitLost': to_wire(profit_lost),
        }
        logger.info(f"[RETURN] Processing return: {len(items)} lines, refund {refund}")
        result = self.gateway.process_return(payload)

        sale_return = self._fold(store_id, lambda: self.store.upsert(Return.from_dict(result)))
        if from_cart:
            self.cart.clear()

        self._emit_print(PrintMode.RETURN_RECEIPT, sale_return)
        return sale_return

    # =====================================================
    # STOCK AND PURCHASES
    # =====================================================

    def add_stock(self, intake: StockIntake) -> Dict[str, Any]:
        """
        Restock a variant: a fully paid single-line purchase, a stock batch
        and the variant's new purchase and selling prices, in one call.

        Returns:
            {'purchase': Purchase, 'stock_batch': StockBatch, 'variant': ProductVariant}
        """
        store_id = self._require_store()

        # 1. Validate
        quantity = parse_amount(intake.quantity, 'Quantity')
        purchase_price = parse_amount(intake.purchase_price, 'Purchase price')
        selling_price = parse_amount(intake.selling_price, 'Selling price')

        if quantity <= 0:
            raise ValidationError('Quantity must be greater than 0')
        if purchase_price < 0:
            raise ValidationError('Purchase price cannot be negative')
        if selling_price <= purchase_price:
            raise ValidationError('Selling price must be greater than the purchase price')

        variant = self.store.get_or_404(ProductVariant, intake.variant_id)
        product = self.store.get(Product, variant.product_id)
        if intake.supplier_id:
            self.store.get_or_404(Supplier, intake.supplier_id)

        # 2. Remote commit
        total = quantity * purchase_price
        now = _now_iso()
        payload = {
            'purchase': {
                'storeId': store_id,
                'supplierId': intake.supplier_id,
                'date': now,
                'items': [{
                    'variantId': variant.id,
                    'productId': variant.product_id,
                    'productName': product.name if product is not None else '',
                    'variantName': variant.name,
                    'quantity': to_wire(quantity),
                    'purchasePrice': to_wire(purchase_price),
                }],
                'totalAmount': to_wire(total),
                'amountPaid': to_wire(total),
                'remainingAmount': 0,
                'paymentMethod': 'cash',
                'reference': STOCK_ADJUSTMENT_REFERENCE,
            },
            'stockBatch': {
                'storeId': store_id,
                'variantId': variant.id,
                'quantity': to_wire(quantity),
                'purchasePrice': to_wire(purchase_price),
                'createdAt': now,
            },
            'variant': {
                'id': variant.id,
                'purchasePrice': to_wire(purchase_price),
                'price': to_wire(selling_price),
            },
        }
        logger.info(f"[STOCK] Adding {quantity} to variant {variant.id} at {purchase_price}")
        result = self.gateway.add_stock(payload)

        # 3. Fold
        def apply():
            return {
                'purchase': self.store.upsert(Purchase.from_dict(result['purchase'])),
                'stock_batch': self.store.upsert(StockBatch.from_dict(result['stockBatch'])),
                'variant': self.store.upsert(ProductVariant.from_dict(result['variant'])),
            }

        return self._fold(store_id, apply)

    def add_purchase(self, supplier_id: Optional[str], lines: Sequence[PurchaseLineForm], amount_paid,
                     payment_method: str = 'cash', reference: Optional[str] = None) -> Dict[str, Any]:
        """
        Record a supplier purchase; every line becomes a stock batch.

        Returns:
            {'purchase': Purchase, 'stock_batches': [StockBatch]}
        """
        store_id = self._require_store()

        # 1. Validate
        if not lines:
            raise ValidationError('A purchase needs at least one line')

        items = []
        total = Decimal('0')
        for line in lines:
            quantity = parse_amount(line.quantity, 'Quantity')
            purchase_price = parse_amount(line.purchase_price, 'Purchase price')
            if quantity <= 0:
                raise ValidationError('Quantity must be greater than 0')
            if purchase_price < 0:
                raise ValidationError('Purchase price cannot be negative')

            variant = self.store.get_or_404(ProductVariant, line.variant_id)
            product = self.store.get(Product, variant.product_id)
            items.append({
                'variantId': variant.id,
                'productId': variant.product_id,
                'productName': product.name if product is not None else '',
                'variantName': variant.name,
                'quantity': to_wire(quantity),
                'purchasePrice': to_wire(purchase_price),
            })
            total += quantity * purchase_price

        amount_paid = parse_amount(amount_paid, 'Amount paid')
        if amount_paid < 0 or amount_paid > total:
            raise ValidationError('Amount paid must be between 0 and the purchase total')

        remaining = total - amount_paid
        if remaining > 0 and not supplier_id:
            raise ValidationError('A supplier is required for a purchase on credit')
        if supplier_id:
            self.store.get_or_404(Supplier, supplier_id)

        # 2. Remote commit
        payload = {
            'storeId': store_id,
            'supplierId': supplier_id,
            'date': _now_iso(),
            'items': items,
            'totalAmount': to_wire(total),
            'amountPaid': to_wire(amount_paid),
            'remainingAmount': to_wire(remaining),
            'paymentMethod': payment_method or 'cash',
            'reference': reference,
        }
        logger.info(f"[PURCHASE] Recording purchase: {len(items)} lines, total {total}, paid {amount_paid}")
        result = self.gateway.add_purchase(payload)

        # 3. Fold
        def apply():
            return {
                'purchase': self.store.upsert(Purchase.from_dict(result['purchase'])),
                'stock_batches': self.store.upsert_many(
                    StockBatch.from_dict(batch) for batch in result.get('stockBatches') or []
                ),
            }

        return self._fold(store_id, apply)

    # =====================================================
    # DEBT PAYMENTS
    # =====================================================

    def pay_customer_debt(self, customer_id: str, amount) -> Optional[Sale]:
        """
        Record a customer payment as a sale without items whose remaining
        amount is the negated payment.

        The check against the derived debt reads the mirror; a concurrent
        payment from another client can still overpay.
        """
        store_id = self._require_store()

        amount = parse_amount(amount, 'Amount')
        if amount <= 0:
            raise ValidationError('Payment amount must be greater than 0')

        customer = self.store.get_or_404(Customer, customer_id)
        debt = self.debts.customer_debt(customer_id)
        if amount > debt:
            raise ValidationError(
                f'Payment exceeds the outstanding balance of {customer.name} '
                f'({format_money(debt, self.currency_symbol)})'
            )

        payload = {
            'storeId': store_id,
            'userId': self.user_id,
            'customerId': customer_id,
            'date': _now_iso(),
            'items': [],
            'total': 0,
            'discount': 0,
            'downPayment': to_wire(amount),
            'remainingAmount': to_wire(-amount),
            'profit': 0,
        }
        logger.info(f"[DEBT] Customer {customer_id} pays {amount} (balance {debt})")
        result = self.gateway.pay_customer_debt(payload)

        return self._fold(store_id, lambda: self.store.upsert(Sale.from_dict(result)))

    def pay_supplier_debt(self, supplier_id: str, amount) -> List[Purchase]:
        """Pay a supplier; the amount settles open purchases oldest first."""
        store_id = self._require_store()

        amount = parse_amount(amount, 'Amount')
        if amount <= 0:
            raise ValidationError('Payment amount must be greater than 0')

        supplier = self.store.get_or_404(Supplier, supplier_id)
        debt = self.debts.supplier_debt(supplier_id)
        if amount > debt:
            raise ValidationError(
                f'Payment exceeds the outstanding balance to {supplier.name} '
                f'({format_money(debt, self.currency_symbol)})'
            )

        open_purchases = [
            purchase for purchase in self.store.list(Purchase, order_by=Purchase.date, supplier_id=supplier_id)
            if (purchase.remaining_amount or Decimal('0')) > 0
        ]
        payload = {
            'storeId': store_id,
            'supplierId': supplier_id,
            'amount': to_wire(amount),
            'date': _now_iso(),
            'purchases': allocate_payment(open_purchases, amount),
        }
        logger.info(f"[DEBT] Paying supplier {supplier_id} {amount} over {len(payload['purchases'])} purchases")
        result = self.gateway.pay_supplier_debt(payload)

        updated = self._fold(store_id, lambda: self.store.upsert_many(
            Purchase.from_dict(purchase) for purchase in result.get('purchases') or []
        ))
        return updated or []

    # =====================================================
    # CATALOG
    # =====================================================

    def _variant_payload(self, store_id: str, product_id: Optional[str], form: VariantForm) -> Dict[str, Any]:
        threshold = parse_amount(form.low_stock_threshold, 'Low stock threshold', default=None)
        payload = {
            'storeId': store_id,
            'name': form.name.strip(),
            'price': to_wire(parse_amount(form.price, 'Price', default=Decimal('0'))),
            'priceSemiWholesale': to_wire(
                parse_amount(form.price_semi_wholesale, 'Semi-wholesale price', default=Decimal('0'))
            ),
            'priceWholesale': to_wire(parse_amount(form.price_wholesale, 'Wholesale price', default=Decimal('0'))),
            'purchasePrice': to_wire(parse_amount(form.purchase_price, 'Purchase price', default=Decimal('0'))),
            'barcode': (form.barcode or '').strip() or None,
            'lowStockThreshold': to_wire(threshold if threshold is not None else self.default_low_stock_threshold),
            'image': form.image or '',
        }
        if product_id:
            payload['productId'] = product_id
        if form.id:
            payload['id'] = form.id
        return payload

    def _validate_product_form(self, product: ProductForm, variants: Sequence[VariantForm]) -> None:
        if not (product.name or '').strip():
            raise ValidationError('Product name is required')

        if product.type is ProductType.SERVICE:
            if variants:
                raise ValidationError('A service cannot have variants')
            for label, value in (('Price', product.price), ('Semi-wholesale price', product.price_semi_wholesale),
                                 ('Wholesale price', product.price_wholesale)):
                if parse_amount(value, label, default=Decimal('0')) < 0:
                    raise ValidationError(f'{label} cannot be negative')
            return

        if not variants:
            raise ValidationError('A product needs at least one variant')

        own_ids = {form.id for form in variants if form.id}
        seen_barcodes = set()
        for form in variants:
            if not (form.name or '').strip():
                raise ValidationError('Variant name is required')
            amounts = (
                ('Price', form.price), ('Purchase price', form.purchase_price),
                ('Semi-wholesale price', form.price_semi_wholesale), ('Wholesale price', form.price_wholesale),
                ('Stock quantity', form.stock_quantity), ('Low stock threshold', form.low_stock_threshold),
            )
            for label, value in amounts:
                if parse_amount(value, label, default=Decimal('0')) < 0:
                    raise ValidationError(f'Variant {form.name}: amounts cannot be negative')

            barcode = (form.barcode or '').strip()
            if not barcode:
                continue
            if barcode in seen_barcodes:
                raise ValidationError(f'Barcode {barcode} is used twice')
            seen_barcodes.add(barcode)

            owner = self.store.variant_by_barcode(barcode)
            if owner is not None and owner.id not in own_ids:
                raise ValidationError(f'Barcode {barcode} is already used by another variant')

    def _product_payload(self, store_id: str, form: ProductForm) -> Dict[str, Any]:
        payload = {
            'storeId': store_id,
            'name': form.name.strip(),
            'type': form.type.value,
            'categoryId': form.category_id,
            'supplierId': form.supplier_id,
            'image': form.image or '',
            'price': to_wire(parse_amount(form.price, 'Price', default=None)),
            'priceSemiWholesale': to_wire(
                parse_amount(form.price_semi_wholesale, 'Semi-wholesale price', default=None)
            ),
            'priceWholesale': to_wire(parse_amount(form.price_wholesale, 'Wholesale price', default=None)),
        }
        if form.id:
            payload['id'] = form.id
        return payload

    def upsert_product_with_variants(self, product: ProductForm, variants: Sequence[VariantForm] = ()) -> Dict[str, Any]:
        """
        Create or update a product with its variants in one remote call.

        Creating sends the variants with their initial stock quantity.
        Updating diffs the submitted variants against the mirrored ones and
        restocks any existing variant whose requested quantity exceeds its
        derived stock.

        Returns:
            {'product': Product, 'variants': [ProductVariant],
             'deleted_variant_ids': [str], 'stock_batches': [StockBatch]}
        """
        store_id = self._require_store()
        variants = list(variants or ())
        self._validate_product_form(product, variants)

        if product.id:
            return self._update_product(store_id, product, variants)
        return self._create_product(store_id, product, variants)

    def _create_product(self, store_id: str, product: ProductForm, variants: List[VariantForm]) -> Dict[str, Any]:
        payload = {
            'product': self._product_payload(store_id, product),
            'variants': [
                dict(self._variant_payload(store_id, None, form),
                     stockQuantity=to_wire(parse_amount(form.stock_quantity, 'Stock quantity', default=Decimal('0'))))
                for form in variants
            ],
        }
        logger.info(f"[CATALOG] Creating product {product.name} with {len(variants)} variants")
        result = self.gateway.add_product_with_variants(payload)

        def apply():
            return {
                'product': self.store.upsert(Product.from_dict(result['product'])),
                'variants': self.store.upsert_many(
                    ProductVariant.from_dict(row) for row in result.get('variants') or []
                ),
                'deleted_variant_ids': [],
                'stock_batches': self.store.upsert_many(
                    StockBatch.from_dict(row) for row in result.get('stockBatches') or []
                ),
            }

        return self._fold(store_id, apply)

    def _update_product(self, store_id: str, product: ProductForm, variants: List[VariantForm]) -> Dict[str, Any]:
        self.store.get_or_404(Product, product.id)
        existing = self.store.variants_for_product(product.id)
        updated, inserted, deleted_ids = diff_variants(existing, variants)

        # Restock existing variants whose requested quantity exceeds the derived stock
        new_batches = []
        now = _now_iso()
        for form in updated:
            requested = parse_amount(form.stock_quantity, 'Stock quantity', default=Decimal('0'))
            current = self.stock.stock(form.id)
            if requested > current:
                new_batches.append({
                    'storeId': store_id,
                    'variantId': form.id,
                    'quantity': to_wire(requested - current),
                    'purchasePrice': to_wire(parse_amount(form.purchase_price, 'Purchase price', default=Decimal('0'))),
                    'createdAt': now,
                })

        payload = {
            'product': self._product_payload(store_id, product),
            'updatedVariants': [self._variant_payload(store_id, product.id, form) for form in updated],
            'newVariants': [
                dict(self._variant_payload(store_id, product.id, form),
                     stockQuantity=to_wire(parse_amount(form.stock_quantity, 'Stock quantity', default=Decimal('0'))))
                for form in inserted
            ],
            'deletedVariantIds': deleted_ids,
            'newStockBatches': new_batches,
        }
        logger.info(
            f"[CATALOG] Updating product {product.id}: {len(updated)} updated, "
            f"{len(inserted)} new, {len(deleted_ids)} deleted variants"
        )
        result = self.gateway.update_product_with_variants(payload)

        # Fold order: product, updated variants, new variants, deletions, batches
        def apply():
            folded_product = self.store.upsert(Product.from_dict(result['product']))
            folded_variants = self.store.upsert_many(
                ProductVariant.from_dict(row) for row in result.get('updatedVariants') or []
            )
            folded_variants += self.store.upsert_many(
                ProductVariant.from_dict(row) for row in result.get('newVariants') or []
            )
            removed_ids = list(result.get('deletedVariantIds') or [])
            for variant_id in removed_ids:
                self.store.remove(ProductVariant, variant_id)
            batches = self.store.upsert_many(
                StockBatch.from_dict(row) for row in result.get('newStockBatches') or []
            )
            return {
                'product': folded_product,
                'variants': folded_variants,
                'deleted_variant_ids': removed_ids,
                'stock_batches': batches,
            }

        return self._fold(store_id, apply)

    def delete_product(self, product_id: str) -> None:
        """
        Hard delete a product and its variants.

        Sale and return lines keep their own snapshot of name and prices, so
        history is left as it is.
        """
        store_id = self._require_store()
        product = self.store.get(Product, product_id)
        if product is None:
            raise NotFoundError(f'Product {product_id} not found')

        logger.info(f"[CATALOG] Deleting product {product_id} ({product.name})")
        self.gateway.delete(Product.__wire_table__, product_id)

        def apply():
            self.store.remove_where(ProductVariant, product_id=product_id)
            self.store.remove(Product, product_id)

        self._fold(store_id, apply)
