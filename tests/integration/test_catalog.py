"""
Integration tests for product upserts and deletion.
"""
from decimal import Decimal

import pytest

from possync.exceptions import NotFoundError, ValidationError
from possync.forms import ProductForm, VariantForm
from possync.models import Product, ProductType, Sale


class TestCreateProduct:
    """Creating products with their variants."""

    def test_create_with_initial_stock(self, pos):
        """Test create with initial stock."""
        result = pos.upsert_product_with_variants(
            ProductForm(name='Jeans', category_id=None),
            [
                VariantForm(name='32', price=Decimal('300'), purchase_price=Decimal('180'),
                            barcode='J32', stock_quantity=Decimal('4')),
                VariantForm(name='34', price=Decimal('300'), purchase_price=Decimal('180')),
            ]
        )

        product = result['product']
        variants = {v.name: v for v in result['variants']}
        assert product.type is ProductType.GOOD
        assert set(variants) == {'32', '34'}
        assert all(v.product_id == product.id for v in variants.values())
        assert len(result['stock_batches']) == 1
        assert pos.stock_of(variants['32'].id) == Decimal('4')
        assert pos.stock_of(variants['34'].id) == Decimal('0')
        # Missing tier prices are stored as 0; missing threshold uses the configured default
        assert variants['34'].price_wholesale == Decimal('0')
        assert variants['34'].low_stock_threshold == Decimal('5')

    def test_create_service(self, pos):
        """Test creating a service."""
        result = pos.upsert_product_with_variants(
            ProductForm(name='Ironing', type='service', price=Decimal('15'))
        )
        assert result['product'].is_service
        assert result['variants'] == []

    def test_goods_need_a_variant(self, pos, gateway):
        """Test goods need a variant."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(ProductForm(name='Jeans'), [])
        assert gateway.calls == []

    def test_services_have_no_variants(self, pos):
        """Test services have no variants."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(
                ProductForm(name='Ironing', type=ProductType.SERVICE), [VariantForm(name='x')]
            )

    def test_non_numeric_variant_price(self, pos, gateway):
        """Test a variant price that is not a number is refused before any remote call."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(ProductForm(name='Jeans'), [VariantForm(name='32', price='abc')])
        assert gateway.calls == []

    def test_name_required(self, pos):
        """Test a blank name is refused."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(ProductForm(name='  '), [VariantForm(name='M')])

    def test_barcode_taken_by_another_variant(self, pos, gateway):
        """Test barcode taken by another variant."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(ProductForm(name='Cap'), [VariantForm(name='One', barcode='111')])
        assert gateway.calls == []

    def test_barcode_used_twice_in_form(self, pos):
        """Test barcode used twice in form."""
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(
                ProductForm(name='Cap'),
                [VariantForm(name='Red', barcode='C1'), VariantForm(name='Blue', barcode='C1')]
            )


class TestUpdateProduct:
    """Updating a product diffs its variants."""

    def test_update_insert_delete_and_restock(self, pos, gateway):
        """Test update insert delete and restock."""
        created = pos.upsert_product_with_variants(
            ProductForm(name='Jeans'),
            [
                VariantForm(name='32', price=Decimal('300'), purchase_price=Decimal('180'), stock_quantity=Decimal('4')),
                VariantForm(name='34', price=Decimal('300'), purchase_price=Decimal('180')),
            ]
        )
        product_id = created['product'].id
        ids = {v.name: v.id for v in created['variants']}

        # Barcode 111 belongs to the T-shirt: refused before any remote call
        gateway.calls.clear()
        with pytest.raises(ValidationError):
            pos.upsert_product_with_variants(
                ProductForm(name='Slim Jeans', id=product_id),
                [VariantForm(id=ids['32'], name='32', barcode='111')]
            )
        assert gateway.calls == []

        result = pos.upsert_product_with_variants(
            ProductForm(name='Slim Jeans', id=product_id),
            [
                VariantForm(id=ids['32'], name='32', price=Decimal('320'), purchase_price=Decimal('190'),
                            stock_quantity=Decimal('10')),
                VariantForm(name='36', price=Decimal('320'), purchase_price=Decimal('190'), stock_quantity=Decimal('2')),
            ]
        )

        assert result['product'].name == 'Slim Jeans'
        assert result['deleted_variant_ids'] == [ids['34']]
        remaining = {v.name: v for v in pos.store.variants_for_product(product_id)}
        assert set(remaining) == {'32', '36'}
        assert remaining['32'].price == Decimal('320')
        # 4 in stock, 10 requested: one batch of 6 at the new purchase price
        assert pos.stock_of(ids['32']) == Decimal('10')
        assert pos.stock_of(remaining['36'].id) == Decimal('2')
        restock = [b for b in result['stock_batches'] if b.variant_id == ids['32']]
        assert restock[0].quantity == Decimal('6')
        assert restock[0].purchase_price == Decimal('190')

    def test_keeping_own_barcode_is_allowed(self, pos):
        """Test keeping own barcode is allowed."""
        result = pos.upsert_product_with_variants(
            ProductForm(name='T-Shirt', id='prod-shirt'),
            [VariantForm(id='var-shirt-m', name='M', price=Decimal('110'), purchase_price=Decimal('60'),
                         barcode='111', stock_quantity=Decimal('15'))]
        )

        assert result['variants'][0].price == Decimal('110')
        assert result['stock_batches'] == []
        assert pos.stock_of('var-shirt-m') == Decimal('15')

    def test_lower_requested_stock_creates_no_batch(self, pos):
        """Test lower requested stock creates no batch."""
        result = pos.upsert_product_with_variants(
            ProductForm(name='T-Shirt', id='prod-shirt'),
            [VariantForm(id='var-shirt-m', name='M', price=Decimal('100'), stock_quantity=Decimal('3'))]
        )
        assert result['stock_batches'] == []
        assert pos.stock_of('var-shirt-m') == Decimal('15')

    def test_unknown_product(self, pos):
        """Test updating an unknown product."""
        with pytest.raises(NotFoundError):
            pos.upsert_product_with_variants(ProductForm(name='Ghost', id='nope'), [VariantForm(name='x')])


class TestDeleteProduct:
    """Deleting a product cascades to its variants but not to history."""

    def test_delete_keeps_sale_history(self, pos):
        """Test delete keeps sale history."""
        pos.add_variant_to_cart('var-shirt-m')
        sale = pos.complete_sale(100, 100)

        pos.delete_product('prod-shirt')

        assert pos.store.get(Product, 'prod-shirt') is None
        assert pos.store.variants_for_product('prod-shirt') == []
        kept = pos.store.get(Sale, sale.id)
        assert kept.items[0].name == 'T-Shirt - M'
        assert kept.items[0].price == Decimal('100')

    def test_delete_unknown_product(self, pos):
        """Test deleting an unknown product."""
        with pytest.raises(NotFoundError):
            pos.delete_product('nope')
