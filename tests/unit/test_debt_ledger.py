"""
Unit tests for derived customer and supplier debts.
"""
from decimal import Decimal

from possync.models import Purchase, Sale
from possync.services.debt_ledger import customer_debts, rank_debts, supplier_debts


def sale(sale_id, customer_id, total, down_payment, items=True):
    return Sale.from_dict({
        'id': sale_id, 'storeId': 's1', 'customerId': customer_id,
        'items': [{
            'id': 'v1', 'productId': 'p1', 'type': 'good', 'isCustom': False,
            'name': 'Shirt', 'price': total, 'quantity': 1,
        }] if items else [],
        'total': total if items else 0,
        'downPayment': down_payment,
        'remainingAmount': (total - down_payment) if items else -down_payment,
        'profit': 0,
    })


def purchase(purchase_id, supplier_id, total, paid):
    return Purchase.from_dict({
        'id': purchase_id, 'storeId': 's1', 'supplierId': supplier_id,
        'totalAmount': total, 'amountPaid': paid, 'remainingAmount': total - paid,
    })


class TestCustomerDebts:
    """Tests for customer_debts()."""

    def test_sums_remaining_amount_of_credit_sales(self):
        """Test sums remaining amount of credit sales."""
        sales = [sale('s1', 'c1', 100, 40), sale('s2', 'c1', 50, 0), sale('s3', 'c2', 30, 10)]
        assert customer_debts(sales) == {'c1': Decimal('110'), 'c2': Decimal('20')}

    def test_paid_sales_and_walk_in_sales_are_ignored(self):
        """Test paid sales and walk in sales are ignored."""
        sales = [sale('s1', 'c1', 100, 100), sale('s2', None, 80, 0)]
        assert customer_debts(sales) == {}

    def test_debt_payment_records_reduce_the_debt(self):
        """Test debt payment records reduce the debt."""
        sales = [sale('s1', 'c1', 100, 40), sale('pay1', 'c1', 0, 25, items=False)]
        assert customer_debts(sales) == {'c1': Decimal('35')}

    def test_full_payment_settles_the_debt(self):
        """Test full payment settles the debt."""
        sales = [sale('s1', 'c1', 100, 40), sale('pay1', 'c1', 0, 60, items=False)]
        assert customer_debts(sales)['c1'] == Decimal('0')

    def test_payment_with_legacy_custom_line_reduces_the_debt(self):
        """Test older payment records carrying one custom line still count as payments."""
        legacy_payment = Sale.from_dict({
            'id': 'pay1', 'storeId': 's1', 'customerId': 'c1',
            'items': [{
                'id': 'line-1', 'productId': 'line-1', 'type': 'service', 'isCustom': True,
                'name': 'Paiement de dette', 'price': 25, 'quantity': 1,
            }],
            'total': 0, 'downPayment': 25, 'remainingAmount': -25, 'profit': 0,
        })

        assert legacy_payment.is_debt_payment is True
        assert customer_debts([sale('s1', 'c1', 100, 40), legacy_payment]) == {'c1': Decimal('35')}

    def test_debt_payment_is_recognised(self):
        """Test debt payment is recognised."""
        assert sale('pay1', 'c1', 0, 25, items=False).is_debt_payment is True
        assert sale('s1', 'c1', 100, 40).is_debt_payment is False


class TestSupplierDebts:
    """Tests for supplier_debts()."""

    def test_sums_open_purchases_per_supplier(self):
        """Test sums open purchases per supplier."""
        purchases = [
            purchase('p1', 'sup1', 100, 40),
            purchase('p2', 'sup1', 30, 30),
            purchase('p3', 'sup2', 10, 0),
            purchase('p4', None, 99, 0),
        ]
        assert supplier_debts(purchases) == {'sup1': Decimal('60'), 'sup2': Decimal('10')}


class TestRankDebts:
    """Tests for rank_debts()."""

    def test_largest_first_and_settled_dropped(self):
        """Test largest first and settled dropped."""
        ranked = rank_debts({'a': Decimal('10'), 'b': Decimal('0'), 'c': Decimal('45')})
        assert ranked == [('c', Decimal('45')), ('a', Decimal('10'))]
