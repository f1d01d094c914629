"""Pure aggregation engine: buckets, categories, filters, axis scaling."""
from .axis import axis_scale, nice_max, nice_step
from .buckets import daily_cashflow, daily_sums, monthly_expense_window, yearly_expense_sums
from .categories import category_shares, category_totals
from .filters import (
    apply_filter,
    distinct_categories,
    filtered_totals,
    monthly_expense_filtered,
    net,
    sum_expense,
    sum_income,
)
