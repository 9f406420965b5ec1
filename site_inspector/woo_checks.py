"""WooCommerce inspectors — fatal-error logs, templates, orders and subscriptions."""

import functools
import os
import re

from site_inspector.registry import Argument, inspector
from site_inspector.result import Data, Failure, TabularResult, tabulate
from site_inspector.scanner import DEFAULT_DAYS, MAX_DAYS, scan_directory

OUTDATED_TEMPLATE = re.compile(r"(.*?)\s+is\s+outdated")

NOT_ACTIVE = "WooCommerce is not installed or activated."


def requires_woocommerce(func):
    """Fail the inspection unless the WooCommerce plugin is active."""
    @functools.wraps(func)
    def wrapper(site, **kwargs):
        if not site.wp.succeeds("plugin", "is-active", "woocommerce"):
            return Failure(NOT_ACTIVE)
        return func(site, **kwargs)
    return wrapper


@inspector(
    "check-wc-errors",
    "Shows WooCommerce fatal error logs",
    Argument("days", DEFAULT_DAYS, limit=MAX_DAYS),
)
def check_wc_errors(site, days=DEFAULT_DAYS):
    return scan_directory(
        os.path.join(site.content_dir, "wc-logs"),
        "fatal-errors*",
        days=days,
        now=site.now(),
        empty_message=f"No WooCommerce fatal errors found in the last {days} days.",
    )


@inspector("check-wc-templates", "Checks for outdated WooCommerce templates")
@requires_woocommerce
def check_wc_templates(site):
    output = site.wp.eval_php("do_action('woocommerce_template_debug_output');")
    rows = [
        {"Template": template.strip(), "Status": "Outdated"}
        for template in OUTDATED_TEMPLATE.findall(output)
    ]
    return tabulate(("Template", "Status"), rows, "No outdated WooCommerce templates found.")


@inspector("wc-attribution-stats", "Shows WooCommerce order attribution statistics")
@requires_woocommerce
def wc_attribution_stats(site):
    records = site.db.query(
        f"SELECT meta_value AS source, COUNT(*) AS count FROM {site.db.table('postmeta')} "
        f"WHERE meta_key = '_wc_order_attribution' GROUP BY meta_value ORDER BY count DESC"
    )
    return tabulate(
        ("source", "count"),
        records,
        "No order attribution data found.",
        title="WooCommerce Order Attribution Statistics:",
    )


def _price(site, amount) -> str:
    currency = site.wp.option("woocommerce_currency", "") or ""
    return f"{currency} {float(amount or 0):,.2f}".strip()


@inspector("wc-stats", "Shows WooCommerce orders, revenue and products")
@requires_woocommerce
def wc_stats(site):
    posts = site.db.table("posts")
    orders = site.db.scalar(
        f"SELECT COUNT(*) FROM {posts} WHERE post_type = 'shop_order' "
        f"AND post_status IN ('wc-completed', 'wc-processing')"
    )
    revenue = site.db.scalar(
        f"SELECT SUM(meta_value) FROM {site.db.table('postmeta')} WHERE meta_key = '_order_total'"
    )
    products = site.db.scalar(
        f"SELECT COUNT(*) FROM {posts} WHERE post_type = 'product' AND post_status = 'publish'"
    )
    rows = (
        {"Metric": "Total Orders", "Value": orders},
        {"Metric": "Total Revenue", "Value": _price(site, revenue)},
        {"Metric": "Total Products", "Value": products},
    )
    return Data(TabularResult(columns=("Metric", "Value"), rows=rows))


@inspector("wc-subscription-growth", "Shows WooCommerce subscription growth by month")
@requires_woocommerce
def wc_subscription_growth(site):
    records = site.db.query(
        f"SELECT DATE_FORMAT(post_date, '%Y-%m') AS month, COUNT(*) AS count "
        f"FROM {site.db.table('posts')} "
        f"WHERE post_type = 'shop_subscription' AND post_status = 'wc-active' "
        f"GROUP BY month ORDER BY month DESC"
    )
    return tabulate(
        ("month", "count"),
        records,
        "No active subscriptions found.",
        title="WooCommerce Subscription Growth by Month:",
    )


@inspector("wc-subscription-stats", "Shows WooCommerce subscription statistics")
@requires_woocommerce
def wc_subscription_stats(site):
    posts = site.db.table("posts")
    base = f"SELECT COUNT(*) FROM {posts} WHERE post_type = 'shop_subscription'"
    rows = (
        {"Metric": "Total Subscriptions", "Value": site.db.scalar(base)},
        {"Metric": "Active Subscriptions",
         "Value": site.db.scalar(f"{base} AND post_status = 'wc-active'")},
        {"Metric": "Cancelled Subscriptions",
         "Value": site.db.scalar(f"{base} AND post_status = 'wc-cancelled'")},
    )
    return Data(
        TabularResult(columns=("Metric", "Value"), rows=rows),
        title="WooCommerce Subscription Statistics:",
    )
