import copy
import uuid
from collections import defaultdict

import pytest

from possync import create_client
from possync.exceptions import RemoteFailure
from possync.gateway import RemoteGateway

STORE_ID = 'store-1'
OTHER_STORE_ID = 'store-2'
USER_ID = 'user-1'


class FakeGateway(RemoteGateway):
    """
    In-memory remote store.

    Records are kept per table in wire format. Every compound endpoint
    applies all of its writes or none, like the real server functions.
    """

    def __init__(self):
        self.tables = defaultdict(dict)
        self.calls = []
        self.fail_next = None
        self.before_call = None

    def _call(self, name):
        self.calls.append(name)
        if self.before_call is not None:
            hook, self.before_call = self.before_call, None
            hook()
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def _insert(self, table, data):
        record = copy.deepcopy(data)
        if not record.get('id'):
            record['id'] = str(uuid.uuid4())
        self.tables[table][record['id']] = record
        return copy.deepcopy(record)

    def _update(self, table, data):
        record = self.tables[table].get(data.get('id'))
        if record is None:
            raise RemoteFailure(f"{table} record {data.get('id')} not found", status_code=404)
        record.update(copy.deepcopy(data))
        return copy.deepcopy(record)

    def _variant_with_batch(self, variant, product_id, batches):
        variant = dict(variant)
        stock_quantity = variant.pop('stockQuantity', 0) or 0
        variant['productId'] = product_id
        created = self._insert('productVariants', variant)
        if stock_quantity > 0:
            batches.append(self._insert('stockBatches', {
                'storeId': created['storeId'],
                'variantId': created['id'],
                'quantity': stock_quantity,
                'purchasePrice': created.get('purchasePrice', 0),
                'createdAt': '2024-01-01T00:00:00Z',
            }))
        return created

    def seed(self, table, **record):
        record.setdefault('storeId', STORE_ID)
        return self._insert(table, record)

    def records(self, table):
        return list(self.tables[table].values())

    # --- Generic per-table CRUD -------------------------------------------

    def list(self, table, store_id):
        self._call('list')
        return [copy.deepcopy(r) for r in self.tables[table].values() if r.get('storeId') == store_id]

    def create(self, table, data):
        self._call('create')
        return self._insert(table, data)

    def update(self, table, data):
        self._call('update')
        return self._update(table, data)

    def delete(self, table, record_id):
        self._call('delete')
        self.tables[table].pop(record_id, None)

    def delete_for_store(self, table, store_id):
        self._call('delete_for_store')
        for record_id in [k for k, r in self.tables[table].items() if r.get('storeId') == store_id]:
            del self.tables[table][record_id]

    # --- Compound endpoints -----------------------------------------------

    def complete_sale(self, sale):
        self._call('complete_sale')
        return self._insert('sales', sale)

    def process_return(self, sale_return):
        self._call('process_return')
        return self._insert('returns', sale_return)

    def add_stock(self, payload):
        self._call('add_stock')
        return {
            'purchase': self._insert('purchases', payload['purchase']),
            'stockBatch': self._insert('stockBatches', payload['stockBatch']),
            'variant': self._update('productVariants', payload['variant']),
        }

    def add_purchase(self, purchase):
        self._call('add_purchase')
        created = self._insert('purchases', purchase)
        batches = [
            self._insert('stockBatches', {
                'storeId': created['storeId'],
                'variantId': item['variantId'],
                'quantity': item['quantity'],
                'purchasePrice': item['purchasePrice'],
                'createdAt': created['date'],
            })
            for item in created['items']
        ]
        return {'purchase': created, 'stockBatches': batches}

    def pay_customer_debt(self, payment_sale):
        self._call('pay_customer_debt')
        return self._insert('sales', payment_sale)

    def pay_supplier_debt(self, payload):
        self._call('pay_supplier_debt')
        return {'purchases': [self._update('purchases', update) for update in payload['purchases']]}

    def add_product_with_variants(self, payload):
        self._call('add_product_with_variants')
        product = self._insert('products', payload['product'])
        batches = []
        variants = [self._variant_with_batch(v, product['id'], batches) for v in payload['variants']]
        return {'product': product, 'variants': variants, 'stockBatches': batches}

    def update_product_with_variants(self, payload):
        self._call('update_product_with_variants')
        product = self._update('products', payload['product'])
        updated = [self._update('productVariants', v) for v in payload['updatedVariants']]
        batches = []
        new = [self._variant_with_batch(v, product['id'], batches) for v in payload['newVariants']]
        for variant_id in payload['deletedVariantIds']:
            self.tables['productVariants'].pop(variant_id, None)
        batches = [self._insert('stockBatches', b) for b in payload['newStockBatches']] + batches
        return {
            'product': product,
            'updatedVariants': updated,
            'newVariants': new,
            'deletedVariantIds': list(payload['deletedVariantIds']),
            'newStockBatches': batches,
        }


def seed_store(gateway):
    """A T-shirt variant with 15 in stock, a repair service, a customer and a supplier."""
    gateway.seed('products', id='prod-shirt', name='T-Shirt', type='good', image='')
    gateway.seed(
        'productVariants', id='var-shirt-m', productId='prod-shirt', name='M',
        price=100, priceSemiWholesale=90, priceWholesale=80, purchasePrice=60,
        barcode='111', lowStockThreshold=5, image=''
    )
    gateway.seed('stockBatches', id='batch-1', variantId='var-shirt-m', quantity=10, purchasePrice=60,
                 createdAt='2024-01-01T08:00:00Z')
    gateway.seed('stockBatches', id='batch-2', variantId='var-shirt-m', quantity=5, purchasePrice=60,
                 createdAt='2024-01-02T08:00:00Z')
    gateway.seed('products', id='prod-repair', name='Repair', type='service',
                 price=50, priceSemiWholesale=40, priceWholesale=0)
    gateway.seed('customers', id='cust-1', name='Amina', phone='0600000000')
    gateway.seed('suppliers', id='supp-1', name='Textile Co', phone='0500000000')
    gateway.seed('users', id=USER_ID, name='Seller', role='seller', password='never-mirrored')
    # Another store's data must never reach the mirror
    gateway.seed('customers', id='cust-other', name='Other', storeId=OTHER_STORE_ID)


@pytest.fixture(scope='function')
def gateway():
    """Create an empty in-memory remote store."""
    return FakeGateway()


@pytest.fixture(scope='function')
def client(gateway):
    """Create a logged-out client on an in-memory mirror."""
    client = create_client('config.TestConfig', gateway=gateway)
    yield client
    client.logout()
    client.engine.dispose()


@pytest.fixture(scope='function')
def pos(client, seeded):
    """Client logged in to a seeded store."""
    gateway = seeded
    client.login(STORE_ID, USER_ID)
    gateway.calls.clear()
    return client


@pytest.fixture(scope='function')
def printed(pos):
    """Collect the print intents emitted by the client."""
    intents = []
    pos.on_print(intents.append)
    return intents


@pytest.fixture(scope='function')
def seeded(gateway):
    """Seeded remote store, client still logged out."""
    seed_store(gateway)
    return gateway
