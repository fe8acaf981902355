"""
Unit tests -- filter, sort and limit extraction.
"""
from src.interpreter.extractors import (
    extract_filters,
    extract_limit,
    extract_sort,
    find_field_near,
)
from src.interpreter.schema import Filter, SortSpec


def _f(field, operator, value):
    return Filter(field=field, operator=operator, value=value)



def test_role_is_admin():
    assert _f("role", "eq", "admin") in extract_filters("list users where role is admin", "users")


def test_status_is_active():
    assert _f("status", "eq", "active") in extract_filters("show users status is active", "users")


def test_category_equals():
    filters = extract_filters("products category equals electronics", "products")
    assert _f("category", "eq", "electronics") in filters


def test_role_equals_sign():
    assert _f("role", "eq", "manager") in extract_filters("users role = manager", "users")


def test_string_value_is_lowercased():
    assert _f("role", "eq", "admin") in extract_filters("users role is Admin", "users")



def test_name_contains():
    assert _f("name", "contains", "john") in extract_filters("users name contains john", "users")


def test_email_contains():
    assert _f("email", "contains", "gmail") in extract_filters("users email contains gmail", "users")


def test_contains_is_case_insensitive():
    upper = extract_filters("NAME CONTAINS JOHN", "users")
    lower = extract_filters("name contains john", "users")
    assert upper == lower
    assert _f("name", "contains", "john") in upper



def test_revenue_above_is_numeric():
    filters = extract_filters("sales revenue above 1000", "sales")
    assert _f("revenue", "gt", 1000) in filters
    revenue = next(f for f in filters if f.field == "revenue")
    assert isinstance(revenue.value, int)


def test_price_less_than():
    assert _f("price", "lt", 50) in extract_filters("products price less than 50", "products")


def test_stock_at_least():
    assert _f("stock", "gte", 100) in extract_filters("products stock at least 100", "products")


def test_rating_greater_than_decimal():
    assert _f("rating", "gt", 4.5) in extract_filters("products rating greater than 4.5", "products")


def test_sessions_over_maps_to_canonical_field():
    assert _f("sessionsThisMonth", "gt", 20) in extract_filters("users sessions over 20", "users")


def test_units_sold_below():
    assert _f("unitsSold", "lt", 500) in extract_filters("sales units sold below 500", "sales")


def test_profit_at_most():
    assert _f("profit", "lte", 5000) in extract_filters("sales profit at most 5000", "sales")


def test_or_more_suffix():
    assert _f("stock", "gte", 10) in extract_filters("products stock 10 or more", "products")


def test_up_to():
    assert _f("price", "lte", 30) in extract_filters("products price up to 30", "products")


def test_numeric_value_without_field_is_dropped():
    prompt = "revenue " + "x " * 30 + "above 100"
    assert extract_filters(prompt, "sales") == []


def test_nearest_field_wins():
    """The keyword closest to the value owns it, not the first one mentioned."""
    filters = extract_filters("revenue and profit above 100", "sales")
    assert filters == [_f("profit", "gt", 100)]


def test_find_field_near_window():
    text = "sales revenue above 1000"
    ref = find_field_near(text, text.index("above"))
    assert ref is not None and ref.field == "revenue"
    assert find_field_near("above 1000", 0) is None



def test_multiple_string_filters():
    filters = extract_filters("list active users role is admin and name contains john", "users")
    assert len(filters) >= 2
    assert _f("role", "eq", "admin") in filters
    assert _f("name", "contains", "john") in filters


def test_numeric_filters_follow_operator_table_order():
    filters = extract_filters("products price below 100 and stock above 50", "products")
    assert filters == [_f("stock", "gt", 50), _f("price", "lt", 100)]


def test_status_and_sessions():
    filters = extract_filters("users status is active and sessions above 10", "users")
    assert _f("status", "eq", "active") in filters
    assert _f("sessionsThisMonth", "gt", 10) in filters


def test_numeric_before_string_filters():
    filters = extract_filters("users role is admin and sessions above 10", "users")
    assert filters[0] == _f("sessionsThisMonth", "gt", 10)
    assert filters[1] == _f("role", "eq", "admin")


def test_no_deduplication_and_cross_dataset_fields():
    """'price is 10' yields both a numeric and a string filter, even for users."""
    filters = extract_filters("users price is 10", "users")
    assert _f("price", "eq", 10) in filters
    assert _f("price", "eq", "10") in filters



def test_empty_prompt_has_no_filters():
    assert extract_filters("", "sales") == []


def test_active_shorthand_for_users():
    assert extract_filters("show users active", "users") == [_f("status", "eq", "active")]


def test_active_users_is_a_subject_not_a_filter():
    assert extract_filters("show active users", "users") == []


def test_active_shorthand_skipped_when_status_present():
    filters = extract_filters("users status is pending and active", "users")
    assert filters == [_f("status", "eq", "pending")]


def test_active_shorthand_only_for_users():
    assert extract_filters("show active products", "products") == []


def test_in_stock():
    assert _f("status", "eq", "in_stock") in extract_filters("show products in stock", "products")


def test_low_stock():
    assert _f("status", "eq", "low_stock") in extract_filters("show products low stock", "products")


def test_out_of_stock_hyphenated():
    assert _f("status", "eq", "out_of_stock") in extract_filters("products out-of-stock", "products")


def test_stock_shorthand_only_for_products():
    assert extract_filters("show users in stock", "users") == []


def test_extract_filters_is_stable():
    prompt = "products price below 100 and category is electronics"
    assert extract_filters(prompt, "products") == extract_filters(prompt, "products")



def test_sorted_by_desc():
    assert extract_sort("sales sorted by revenue desc") == SortSpec(field="revenue", direction="desc")


def test_order_by_ascending():
    assert extract_sort("products order by price ascending") == SortSpec(field="price", direction="asc")


def test_sorted_by_ascending():
    assert extract_sort("products sorted by price ascending") == SortSpec(field="price", direction="asc")


def test_sort_without_direction_defaults_desc():
    assert extract_sort("sort by units") == SortSpec(field="unitsSold", direction="desc")


def test_highest():
    assert extract_sort("show highest revenue") == SortSpec(field="revenue", direction="desc")


def test_lowest():
    assert extract_sort("products lowest price") == SortSpec(field="price", direction="asc")


def test_bottom():
    assert extract_sort("bottom rating products") == SortSpec(field="rating", direction="asc")


def test_unmapped_sort_field_used_verbatim():
    assert extract_sort("sort by foo asc") == SortSpec(field="foo", direction="asc")


def test_top_numeral_is_taken_as_sort_field():
    assert extract_sort("top 5 users") == SortSpec(field="5", direction="desc")


def test_sort_family_order_first_match_wins():
    """An explicit 'sorted by' beats an earlier superlative."""
    assert extract_sort("highest revenue sorted by price asc") == SortSpec(field="price", direction="asc")


def test_no_sort():
    assert extract_sort("show users") is None



def test_top_n():
    assert extract_limit("top 5 users") == 5


def test_first_n():
    assert extract_limit("first 10 products") == 10


def test_n_results():
    assert extract_limit("show 3 results") == 3


def test_n_rows():
    assert extract_limit("users 50 rows") == 50


def test_limit_n():
    assert extract_limit("sales limit 20") == 20


def test_show_n():
    assert extract_limit("show 7 users") == 7


def test_limit_pattern_order():
    assert extract_limit("first 3 of the top 10") == 10


def test_zero_is_extractable():
    assert extract_limit("top 0 users") == 0


def test_no_limit():
    assert extract_limit("show users") is None


def test_non_ascii_digits_are_not_numbers():
    assert extract_filters("sales revenue above ١٠٠٠", "sales") == []
    assert extract_limit("top ٥ users") is None
