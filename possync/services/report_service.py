"""
Report service - finance figures derived from the mirrored logs.

Date filtering applies to the sales, returns and expenses of the period;
debts and cost of goods are always computed over every record.
"""
import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from possync.models import LineKind
from possync.services.debt_ledger import customer_debts, supplier_debts, rank_debts

logger = logging.getLogger(__name__)


class DateRange(str, enum.Enum):
    ALL = 'all'
    TODAY = 'today'
    WEEK = 'week'
    MONTH = 'month'
    CUSTOM = 'custom'


def _as_date(value) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _naive(value: datetime) -> datetime:
    """Compare in local wall-clock time; aware datetimes are converted first."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def period_bounds(date_range, start=None, end=None, now: Optional[datetime] = None):
    """
    Resolve a named range to (start, end) datetimes, either may be None.

    - today: from midnight
    - week: from Monday midnight
    - month: from the first day of the month
    - custom: from start at 00:00 to end at 23:59:59.999999
    The end defaults to the end of the current day.
    """
    date_range = DateRange(date_range)
    now = _naive(now or datetime.now())
    end_of_today = datetime.combine(now.date(), time.max)

    if date_range is DateRange.ALL:
        return None, None
    if date_range is DateRange.TODAY:
        return datetime.combine(now.date(), time.min), end_of_today
    if date_range is DateRange.WEEK:
        monday = now.date() - timedelta(days=now.weekday())
        return datetime.combine(monday, time.min), end_of_today
    if date_range is DateRange.MONTH:
        return datetime.combine(now.date().replace(day=1), time.min), end_of_today
    if date_range is DateRange.CUSTOM:
        start_day = _as_date(start)
        end_day = _as_date(end)
        return (
            datetime.combine(start_day, time.min) if start_day else None,
            datetime.combine(end_day, time.max) if end_day else None,
        )
    raise ValueError(f'Unhandled date range: {date_range!r}')


def filter_by_date_range(records: Iterable, date_range='all', start=None, end=None,
                         now: Optional[datetime] = None, attr: str = 'date') -> List:
    """Keep the records whose date falls inside the range. Undated records only pass 'all'."""
    records = list(records)
    if DateRange(date_range) is DateRange.ALL:
        return records
    lower, upper = period_bounds(date_range, start, end, now)

    kept = []
    for record in records:
        value = getattr(record, attr, None)
        if value is None:
            continue
        value = _naive(value)
        if lower is not None and value < lower:
            continue
        if upper is not None and value > upper:
            continue
        kept.append(record)
    return kept


def _non_custom_total(items) -> Decimal:
    return sum(
        (item.line_total for item in items or () if item.kind is not LineKind.CUSTOM),
        Decimal('0')
    )


@dataclass
class FinanceSummary:
    total_revenue: Decimal = Decimal('0')
    custom_item_revenue: Decimal = Decimal('0')
    total_returns: Decimal = Decimal('0')
    net_revenue: Decimal = Decimal('0')
    total_expenses: Decimal = Decimal('0')
    net_profit: Decimal = Decimal('0')
    total_customer_debt: Decimal = Decimal('0')
    customer_debts: List[Tuple[str, Decimal]] = field(default_factory=list)
    total_supplier_debt: Decimal = Decimal('0')
    supplier_debts: List[Tuple[str, Decimal]] = field(default_factory=list)
    cost_of_goods: Decimal = Decimal('0')


def finance_summary(sales, returns, expenses, purchases, date_range='all', start=None, end=None,
                    now: Optional[datetime] = None) -> FinanceSummary:
    """
    Compute the finance overview for a period.

    Revenue only counts non-custom lines. Custom item revenue is whatever is
    left of the sale total, so a manual total below the non-custom subtotal
    makes it negative.
    """
    sales = list(sales)
    purchases = list(purchases)
    period_sales = filter_by_date_range(sales, date_range, start, end, now)
    period_returns = filter_by_date_range(returns, date_range, start, end, now)
    period_expenses = filter_by_date_range(expenses, date_range, start, end, now)

    summary = FinanceSummary()

    # 1. Revenue
    for sale in period_sales:
        non_custom = _non_custom_total(sale.items)
        summary.total_revenue += non_custom
        # Negative when a manual total is set below the non-custom subtotal
        summary.custom_item_revenue += (sale.total or Decimal('0')) - non_custom

    # 2. Returns
    for sale_return in period_returns:
        summary.total_returns += _non_custom_total(sale_return.items)
    summary.net_revenue = summary.total_revenue - summary.total_returns

    # 3. Profit
    summary.total_expenses = sum((expense.amount or Decimal('0') for expense in period_expenses), Decimal('0'))
    profit = sum((sale.profit or Decimal('0') for sale in period_sales), Decimal('0'))
    profit_lost = sum((r.profit_lost or Decimal('0') for r in period_returns), Decimal('0'))
    summary.net_profit = profit - profit_lost - summary.total_expenses

    # 4. Debts, over all records
    by_customer = customer_debts(sales)
    by_supplier = supplier_debts(purchases)
    summary.customer_debts = rank_debts(by_customer)
    summary.total_customer_debt = sum(by_customer.values(), Decimal('0'))
    summary.supplier_debts = rank_debts(by_supplier)
    summary.total_supplier_debt = sum(by_supplier.values(), Decimal('0'))

    summary.cost_of_goods = sum((p.total_amount or Decimal('0') for p in purchases), Decimal('0'))

    logger.debug(
        f"[REPORT] {DateRange(date_range).value}: {len(period_sales)} sales, "
        f"{len(period_returns)} returns, net profit {summary.net_profit}"
    )
    return summary


def top_selling_variants(sales, returns, limit: int = 6) -> List[Tuple[str, str, Decimal]]:
    """(variant_id, name, net quantity) of the best selling goods, returns deducted."""
    sold: Dict[str, List] = {}
    for sale in sales:
        for item in sale.items or ():
            if item.kind is LineKind.GOOD:
                entry = sold.setdefault(item.line_id, [item.name, Decimal('0')])
                entry[1] += item.quantity
    for sale_return in returns:
        for item in sale_return.items or ():
            if item.kind is LineKind.GOOD and item.line_id in sold:
                sold[item.line_id][1] -= item.quantity

    ranked = [
        (variant_id, name, quantity)
        for variant_id, (name, quantity) in sold.items()
        if quantity > 0
    ]
    ranked.sort(key=lambda row: row[2], reverse=True)
    return ranked[:limit]


def seller_report(sales, returns, user_id: Optional[str] = None) -> Dict[str, object]:
    """Sales and refunds of one seller (all sellers when user_id is None)."""
    if user_id:
        sales = [sale for sale in sales if sale.user_id == user_id]
        returns = [r for r in returns if r.user_id == user_id]
    else:
        sales, returns = list(sales), list(returns)

    total_sales = sum((sale.total or Decimal('0') for sale in sales), Decimal('0'))
    total_returns = sum((r.refund_amount or Decimal('0') for r in returns), Decimal('0'))
    return {
        'total_sales': total_sales,
        'total_returns': total_returns,
        'net_activity': total_sales - total_returns,
        'sales_count': len(sales),
        'returns_count': len(returns),
    }
