"""
Directory service - customers, suppliers, categories, expenses and returns.

Plain remote-then-fold CRUD for the single-table entities. Every function
takes the EntityStore and the RemoteGateway explicitly.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from possync.exceptions import ValidationError, OutstandingDebtError
from possync.models import Customer, Supplier, Category, Expense, Return
from possync.forms import parse_amount
from possync.models.wire import to_wire

logger = logging.getLogger(__name__)


def _active_store(store) -> str:
    if not store.is_ready:
        raise ValidationError('No store is loaded; log in first')
    return store.store_id


def _required_name(name: Optional[str], label: str) -> str:
    name = (name or '').strip()
    if not name:
        raise ValidationError(f'{label} name is required')
    return name


def _create(store, gateway, model, data: dict):
    """
    Create a record remotely and fold it.

    A remote answer without a record is logged and yields None; the UI keeps
    its form open and nothing is folded.
    """
    store_id = _active_store(store)
    data = dict(data, storeId=store_id)
    row = gateway.create(model.__wire_table__, data)
    if not row:
        logger.error(f"[DIRECTORY] Remote store returned no {model.__wire_table__} record")
        return None
    if not store.accepts(row.get('storeId', store_id)):
        logger.warning(f"[SYNC] Dropping {model.__wire_table__} record for inactive store")
        return None
    with store.fold():
        return store.upsert(model.from_dict(row))


def _update(store, gateway, model, data: dict):
    store_id = _active_store(store)
    store.get_or_404(model, data.get('id'))
    row = gateway.update(model.__wire_table__, dict(data, storeId=store_id))
    if not store.accepts(row.get('storeId', store_id)):
        logger.warning(f"[SYNC] Dropping {model.__wire_table__} update for inactive store")
        return None
    with store.fold():
        return store.upsert(model.from_dict(row))


def _delete(store, gateway, model, record_id: str) -> None:
    store_id = _active_store(store)
    store.get_or_404(model, record_id)
    gateway.delete(model.__wire_table__, record_id)
    if store.accepts(store_id):
        with store.fold():
            store.remove(model, record_id)


# =====================================================
# CUSTOMERS AND SUPPLIERS
# =====================================================

def add_customer(store, gateway, name: str, phone: Optional[str] = None,
                 email: Optional[str] = None) -> Optional[Customer]:
    data = {'name': _required_name(name, 'Customer'), 'phone': phone or '', 'email': email}
    return _create(store, gateway, Customer, data)


def delete_customer(store, gateway, debts, customer_id: str, currency_symbol: str = 'DH') -> None:
    """
    Delete a customer.

    Raises:
        OutstandingDebtError: The customer still owes money
    """
    customer = store.get_or_404(Customer, customer_id)
    debt = debts.customer_debt(customer_id)
    if debt > 0:
        raise OutstandingDebtError(customer.name, debt, currency_symbol)

    logger.info(f"[DIRECTORY] Deleting customer {customer_id} ({customer.name})")
    _delete(store, gateway, Customer, customer_id)


def add_supplier(store, gateway, name: str, phone: Optional[str] = None,
                 email: Optional[str] = None) -> Optional[Supplier]:
    data = {'name': _required_name(name, 'Supplier'), 'phone': phone or '', 'email': email}
    return _create(store, gateway, Supplier, data)


def delete_supplier(store, gateway, debts, supplier_id: str, currency_symbol: str = 'DH') -> None:
    """
    Delete a supplier.

    Raises:
        OutstandingDebtError: The store still owes this supplier money
    """
    supplier = store.get_or_404(Supplier, supplier_id)
    debt = debts.supplier_debt(supplier_id)
    if debt > 0:
        raise OutstandingDebtError(supplier.name, debt, currency_symbol)

    logger.info(f"[DIRECTORY] Deleting supplier {supplier_id} ({supplier.name})")
    _delete(store, gateway, Supplier, supplier_id)


# =====================================================
# CATEGORIES
# =====================================================

def add_category(store, gateway, name: str) -> Optional[Category]:
    return _create(store, gateway, Category, {'name': _required_name(name, 'Category')})


def update_category(store, gateway, category_id: str, name: str) -> Optional[Category]:
    return _update(store, gateway, Category, {'id': category_id, 'name': _required_name(name, 'Category')})


def delete_category(store, gateway, category_id: str) -> None:
    _delete(store, gateway, Category, category_id)


# =====================================================
# EXPENSES
# =====================================================

def _expense_data(description: str, amount, date=None) -> dict:
    description = (description or '').strip()
    if not description:
        raise ValidationError('Expense description is required')
    amount = parse_amount(amount, 'Expense amount')
    if amount <= 0:
        raise ValidationError('Expense amount must be greater than 0')
    return {
        'description': description,
        'amount': to_wire(amount),
        'date': to_wire(date or datetime.now(timezone.utc)),
    }


def add_expense(store, gateway, description: str, amount, date=None) -> Optional[Expense]:
    return _create(store, gateway, Expense, _expense_data(description, amount, date))


def update_expense(store, gateway, expense_id: str, description: str, amount, date=None) -> Optional[Expense]:
    expense = store.get_or_404(Expense, expense_id)
    data = _expense_data(description, amount, date or expense.date)
    data['id'] = expense_id
    return _update(store, gateway, Expense, data)


def delete_expense(store, gateway, expense_id: str) -> None:
    _delete(store, gateway, Expense, expense_id)


# =====================================================
# RETURNS
# =====================================================

def delete_return(store, gateway, return_id: str) -> None:
    """Delete one return. Its goods leave stock again through the derived fold."""
    logger.info(f"[RETURN] Deleting return {return_id}")
    _delete(store, gateway, Return, return_id)


def delete_all_returns(store, gateway) -> int:
    """Delete every return of the active store. Returns the number of local records removed."""
    store_id = _active_store(store)
    logger.info(f"[RETURN] Deleting all returns of store {store_id}")
    gateway.delete_for_store(Return.__wire_table__, store_id)

    if not store.accepts(store_id):
        return 0
    with store.fold():
        return store.remove_where(Return, store_id=store_id)