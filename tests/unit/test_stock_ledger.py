"""
Unit tests for the derived stock fold.
"""
import itertools
import random
from decimal import Decimal

from possync.models import ProductVariant, Return, Sale, StockBatch
from possync.services.stock_ledger import (
    compute_stock, compute_stock_map, is_low_stock, low_stock_variants
)


def batch(batch_id, variant_id, quantity):
    return StockBatch.from_dict({
        'id': batch_id, 'storeId': 's1', 'variantId': variant_id,
        'quantity': quantity, 'purchasePrice': 10,
    })


def line(line_id, quantity, line_type='good', is_custom=False):
    return {
        'id': line_id, 'productId': 'p-' + line_id, 'storeId': 's1', 'type': line_type,
        'isCustom': is_custom, 'name': line_id, 'price': 20, 'quantity': quantity,
    }


def sale(sale_id, *items):
    return Sale.from_dict({
        'id': sale_id, 'storeId': 's1', 'items': list(items),
        'total': 0, 'downPayment': 0, 'remainingAmount': 0, 'profit': 0,
    })


def sale_return(return_id, *items):
    return Return.from_dict({
        'id': return_id, 'storeId': 's1', 'items': list(items),
        'refundAmount': 0, 'profitLost': 0,
    })


class TestComputeStockMap:
    """Tests for compute_stock_map()."""

    def test_batches_minus_sales_plus_returns(self):
        """Test batches minus sales plus returns."""
        batches = [batch('b1', 'v1', 10), batch('b2', 'v1', 5), batch('b3', 'v2', 3)]
        sales = [sale('s1', line('v1', 12)), sale('s2', line('v2', 1))]
        returns = [sale_return('r1', line('v1', 2))]

        stock = compute_stock_map(batches, sales, returns)

        assert stock == {'v1': Decimal('5'), 'v2': Decimal('2')}

    def test_services_and_custom_lines_do_not_move_stock(self):
        """Test services and custom lines do not move stock."""
        batches = [batch('b1', 'v1', 4)]
        sales = [sale('s1', line('v1', 1), line('svc', 3, 'service'), line('custom', 2, 'service', True))]

        stock = compute_stock_map(batches, sales, [])

        assert stock == {'v1': Decimal('3')}

    def test_fractional_quantities(self):
        """Test fractional quantities."""
        stock = compute_stock_map([batch('b1', 'v1', '2.5')], [sale('s1', line('v1', '0.5'))], [])
        assert stock['v1'] == Decimal('2.0')

    def test_oversold_variant_goes_negative(self):
        """Test oversold variant goes negative."""
        stock = compute_stock_map([batch('b1', 'v1', 1)], [sale('s1', line('v1', 3))], [])
        assert stock['v1'] == Decimal('-2')

    def test_result_does_not_depend_on_record_order(self):
        """Test result does not depend on record order."""
        batches = [batch('b1', 'v1', 10), batch('b2', 'v1', 5), batch('b3', 'v2', 7)]
        sales = [sale('s1', line('v1', 3)), sale('s2', line('v1', 4), line('v2', 2)), sale('s3', line('v2', 1))]
        returns = [sale_return('r1', line('v1', 1)), sale_return('r2', line('v2', 2))]
        expected = compute_stock_map(batches, sales, returns)

        rng = random.Random(7)
        for _ in range(20):
            shuffled = [list(batches), list(sales), list(returns)]
            for collection in shuffled:
                rng.shuffle(collection)
            assert compute_stock_map(*shuffled) == expected

    def test_log_streams_can_be_folded_in_any_sequence(self):
        """Folding the same events as one interleaved stream gives the same stock."""
        batches = [batch('b1', 'v1', 10)]
        sales = [sale('s1', line('v1', 4))]
        returns = [sale_return('r1', line('v1', 1))]
        expected = compute_stock_map(batches, sales, returns)

        for order in itertools.permutations([batches, sales, returns]):
            events = [record for collection in order for record in collection]
            assert compute_stock_map(
                [e for e in events if isinstance(e, StockBatch)],
                [e for e in events if isinstance(e, Sale)],
                [e for e in events if isinstance(e, Return)],
            ) == expected

    def test_compute_stock_of_unknown_variant_is_zero(self):
        """Test compute stock of unknown variant is zero."""
        assert compute_stock('missing', [batch('b1', 'v1', 1)], [], []) == Decimal('0')


class TestLowStock:
    """Tests for the low stock flag."""

    def make_variant(self, variant_id, threshold):
        return ProductVariant(id=variant_id, product_id='p1', store_id='s1', name=variant_id,
                              low_stock_threshold=Decimal(threshold))

    def test_at_threshold_is_low(self):
        """Test at threshold is low."""
        assert is_low_stock(self.make_variant('v1', 5), Decimal('5')) is True

    def test_above_threshold_is_not_low(self):
        """Test above threshold is not low."""
        assert is_low_stock(self.make_variant('v1', 5), Decimal('6')) is False

    def test_low_stock_variants_uses_zero_for_missing_stock(self):
        """Test low stock variants uses zero for missing stock."""
        variants = [self.make_variant('v1', 5), self.make_variant('v2', 0), self.make_variant('v3', 2)]
        stock_map = {'v1': Decimal('10'), 'v3': Decimal('2')}

        low = low_stock_variants(variants, stock_map)

        assert [variant.id for variant in low] == ['v2', 'v3']
