"""
Integration tests for the mirror lifecycle.
"""
from decimal import Decimal

import pytest

from possync.exceptions import NotFoundError, RemoteFailure, ValidationError
from possync.models import Customer, ProductVariant, Sale, User
from possync.services.pricing import PriceTier

STORE_ID = 'store-1'
OTHER_STORE_ID = 'store-2'
USER_ID = 'user-1'


class TestLogin:
    """Tests for login()/logout()."""

    def test_login_loads_only_the_active_store(self, pos):
        """Test login loads only the active store."""
        assert pos.store.is_ready
        assert pos.store_id == STORE_ID
        assert pos.user_id == USER_ID
        assert {c.id for c in pos.store.customers} == {'cust-1'}
        assert len(pos.store.products) == 2
        assert pos.stock_map == {'var-shirt-m': Decimal('15')}

    def test_credentials_never_reach_the_mirror(self, pos):
        """Test credentials never reach the mirror."""
        user = pos.store.get(User, USER_ID)
        assert user.role == 'seller'
        assert 'password' not in user.to_dict()

    def test_logout_clears_everything(self, pos):
        """Test logout clears everything."""
        pos.add_variant_to_cart('var-shirt-m')

        pos.logout()

        assert not pos.store.is_ready
        assert pos.user_id is None
        assert pos.cart.is_empty
        assert pos.store.products == []
        assert pos.store.stock_batches == []
        assert pos.stock_map == {}

    def test_switching_store(self, pos, gateway):
        """Test switching to another store."""
        gateway.seed('customers', id='cust-9', name='Other store customer', storeId=OTHER_STORE_ID)

        pos.login(OTHER_STORE_ID, USER_ID)

        assert {c.id for c in pos.store.customers} == {'cust-other', 'cust-9'}
        assert pos.store.products == []

    def test_failed_load_leaves_an_empty_mirror(self, client, seeded):
        """Test failed load leaves an empty mirror."""
        gateway = seeded
        gateway.fail_next = RemoteFailure('Remote store unreachable', status_code=503)

        with pytest.raises(RemoteFailure):
            client.login(STORE_ID, USER_ID)

        assert not client.store.is_ready
        assert client.store.customers == []

    def test_operations_require_login(self, client):
        """Test operations require login."""
        client.cart.add_custom_item('Gift wrap', '5')
        with pytest.raises(ValidationError):
            client.complete_sale(5, 5)


class TestStoreReads:
    """Tests for the read API."""

    def test_get_or_404(self, pos):
        """Test get_or_404 on a missing record."""
        assert pos.store.get_or_404(Customer, 'cust-1').name == 'Amina'
        with pytest.raises(NotFoundError):
            pos.store.get_or_404(Customer, 'missing')

    def test_variant_lookups(self, pos):
        """Test variant lookups."""
        assert [v.id for v in pos.store.variants_for_product('prod-shirt')] == ['var-shirt-m']
        assert pos.store.variant_by_barcode('111').id == 'var-shirt-m'
        assert pos.store.variant_by_barcode('') is None

    def test_revisions_move_on_fold(self, pos, gateway):
        """Test revisions move on fold."""
        before = pos.store.revision(Sale)
        record = gateway.seed('sales', id='sale-x', total=0, downPayment=0, remainingAmount=0, profit=0, items=[])

        with pos.store.fold():
            pos.store.upsert(Sale.from_dict(record))

        assert pos.store.revision(Sale) == before + 1
        assert pos.store.revision(ProductVariant) >= 0

    def test_failed_fold_rolls_back(self, pos):
        """Test failed fold rolls back."""
        with pytest.raises(RuntimeError):
            with pos.store.fold():
                pos.store.remove(Customer, 'cust-1')
                raise RuntimeError('boom')

        assert pos.store.get(Customer, 'cust-1') is not None


class TestDerivedViewsThroughClient:
    """Price tiers applied through the client."""

    def test_price_tier_switch_reprices_cart(self, pos):
        """Test price tier switch reprices cart."""
        pos.add_variant_to_cart('var-shirt-m')
        pos.add_service_to_cart('prod-repair')

        pos.set_price_tier(PriceTier.SEMI_WHOLESALE)

        assert pos.cart.get('var-shirt-m').price == Decimal('90')
        assert pos.cart.get('prod-repair').price == Decimal('40')
        assert pos.price_for(pos.store.get(ProductVariant, 'var-shirt-m')) == Decimal('90')

    def test_goods_are_not_services(self, pos):
        """Test goods are not services."""
        with pytest.raises(ValidationError):
            pos.add_service_to_cart('prod-shirt')
