"""Inspectors that read the WordPress database tables."""

from datetime import timedelta

from site_inspector.registry import Argument, inspector
from site_inspector.result import Data, Empty, Report, TabularResult, tabulate
from site_inspector.scanner import MAX_DAYS, TIMESTAMP_FORMAT

DEFAULT_INACTIVE_DAYS = 60

AUTOLOAD_VALUES = ("yes", "on", "auto-on", "auto")


@inspector("check-autoloaded", "Analyzes autoloaded options in wp_options")
def check_autoloaded(site):
    autoload = ", ".join(f"'{v}'" for v in AUTOLOAD_VALUES)
    records = site.db.query(
        f"SELECT option_name, LENGTH(option_value) AS size FROM {site.db.table('options')} "
        f"WHERE autoload IN ({autoload}) ORDER BY size DESC LIMIT 50"
    )
    return tabulate(("option_name", "size"), records, "No autoloaded options found.")


@inspector(
    "check-inactive-users",
    "Lists users inactive for a specified period",
    Argument("days", DEFAULT_INACTIVE_DAYS, limit=MAX_DAYS),
)
def check_inactive_users(site, days=DEFAULT_INACTIVE_DAYS):
    date_limit = (site.now() - timedelta(days=days)).strftime(TIMESTAMP_FORMAT)
    records = site.db.query(
        f"SELECT ID, user_login, user_email, user_registered FROM {site.db.table('users')} "
        f"WHERE user_registered < '{date_limit}' "
        f"AND ID NOT IN (SELECT DISTINCT user_id FROM {site.db.table('usermeta')} "
        f"WHERE meta_key = 'last_login')"
    )
    return tabulate(
        ("ID", "user_login", "user_email", "user_registered"),
        records,
        f"No users inactive for more than {days} days.",
    )


@inspector("check-wc-failed-orders", "Lists failed WooCommerce orders")
def check_wc_failed_orders(site):
    records = site.db.query(
        f"SELECT ID, post_date, post_status FROM {site.db.table('posts')} "
        f"WHERE post_type = 'shop_order' AND post_status = 'wc-failed' "
        f"ORDER BY post_date DESC"
    )
    return tabulate(("ID", "post_date", "post_status"), records, "No failed WooCommerce orders found.")


@inspector("check-scheduled-actions", "Lists failed scheduled actions")
def check_scheduled_actions(site):
    records = site.db.query(
        f"SELECT action, status, last_attempt_gmt FROM {site.db.table('actionscheduler_actions')} "
        f"WHERE status = 'failed' ORDER BY last_attempt_gmt DESC"
    )
    return tabulate(
        ("action", "status", "last_attempt_gmt"),
        records,
        "No failed scheduled actions found.",
    )


def _megabytes(*lengths) -> float:
    return sum(int(n or 0) for n in lengths) / 1024 / 1024


@inspector("db-stats", "Displays database size, table sizes, and other DB information")
def db_stats(site):
    tables = site.db.query("SHOW TABLE STATUS")
    if not tables:
        return Empty("No database tables found.")

    total = 0.0
    rows = []
    for table in tables:
        size = _megabytes(table.get("Data_length"), table.get("Index_length"))
        total += size
        rows.append({"table": table["Name"], "size_mb": round(size, 2)})

    return Data(
        TabularResult(columns=("table", "size_mb"), rows=tuple(rows)),
        summary=f"Total Database Size: {round(total, 2)} MB",
    )


@inspector("post-stats", "Shows post counts by status for each post type")
def post_stats(site):
    records = site.db.query(
        f"SELECT post_type, post_status, COUNT(*) AS count FROM {site.db.table('posts')} "
        f"GROUP BY post_type, post_status"
    )
    return tabulate(("post_type", "post_status", "count"), records, "No post data found.")


@inspector("user-stats", "Shows WordPress user statistics and registration trends")
def user_stats(site):
    users = site.db.table("users")
    total = site.db.scalar(f"SELECT COUNT(ID) FROM {users}")
    by_role = site.db.query(
        f"SELECT meta_value AS role, COUNT(user_id) AS count FROM {site.db.table('usermeta')} "
        f"WHERE meta_key = '{site.db.table('capabilities')}' GROUP BY meta_value"
    )
    recent = site.db.query(
        f"SELECT DATE(user_registered) AS date, COUNT(*) AS count FROM {users} "
        f"WHERE user_registered > NOW() - INTERVAL 30 DAY "
        f"GROUP BY DATE(user_registered) ORDER BY date DESC"
    )
    return Report(
        preamble=f"Total Users: {total or 0}",
        parts=(
            Data(TabularResult.from_records(("role", "count"), by_role), title="\nUsers by Role:"),
            Data(
                TabularResult.from_records(("date", "count"), recent),
                title="\nRecent Registrations (Last 30 Days):",
            ),
        ),
    )
