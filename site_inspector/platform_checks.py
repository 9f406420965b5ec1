"""Inspectors that ask WP-CLI about plugins, themes, cron and the PHP runtime."""

from datetime import datetime

from site_inspector.registry import catalogue, inspector
from site_inspector.result import Data, TabularResult, tabulate
from site_inspector.scanner import TIMESTAMP_FORMAT

PAGE_BUILDERS = {
    "elementor/elementor.php": "Elementor",
    "siteorigin-panels/siteorigin-panels.php": "SiteOrigin Page Builder",
    "beaver-builder-lite-version/fl-builder.php": "Beaver Builder",
    "js_composer/js_composer.php": "WPBakery Page Builder",
    "divi-builder/divi-builder.php": "Divi Builder",
    "oxygen/oxygen.php": "Oxygen Builder",
    "bricks/bricks.php": "Bricks Builder",
}

PLUGIN_STATUS = {
    "active": "Active",
    "active-network": "Active",
    "inactive": "Inactive",
    "must-use": "Must-use",
    "dropin": "Drop-in",
}


@inspector("check-cron", "Analyzes WordPress cron jobs and their schedules")
def check_cron(site):
    events = site.wp.json("cron", "event", "list", "--fields=hook,time") or []
    rows = [
        {
            "hook": event["hook"],
            "timestamp": datetime.fromtimestamp(int(event["time"])).strftime(TIMESTAMP_FORMAT),
        }
        for event in events
    ]
    return tabulate(("hook", "timestamp"), rows, "No cron jobs found.")


@inspector("check-theme-builders", "Lists active page builder plugins")
def check_theme_builders(site):
    active = site.wp.option("active_plugins", []) or []
    if isinstance(active, dict):
        active = list(active.values())
    rows = [
        {"Plugin": name, "Status": "Active"}
        for plugin_file, name in PAGE_BUILDERS.items()
        if plugin_file in active
    ]
    return tabulate(("Plugin", "Status"), rows, "No active page builders found.")


@inspector("plugin-stats", "Analyzes WordPress plugins and their status")
def plugin_stats(site):
    plugins = site.wp.json("plugin", "list", "--fields=name,title,version,status") or []
    rows = [
        {
            "name": plugin.get("title") or plugin["name"],
            "version": plugin.get("version", ""),
            "status": PLUGIN_STATUS.get(plugin.get("status"), str(plugin.get("status", "")).capitalize()),
        }
        for plugin in plugins
    ]
    return tabulate(("name", "version", "status"), rows, "No plugins installed.")


@inspector("theme-stats", "Lists themes with versions and updates")
def theme_stats(site):
    themes = site.wp.json("theme", "list", "--fields=name,title,version,update") or []
    rows = [
        {
            "Name": theme.get("title") or theme["name"],
            "Version": theme.get("version", ""),
            "Update Available": "Yes" if theme.get("update") == "available" else "No",
        }
        for theme in themes
    ]
    return tabulate(("Name", "Version", "Update Available"), rows, "No themes installed.")


@inspector("system-stats", "Displays system information (PHP, MySQL, WordPress, limits)")
def system_stats(site):
    php = site.wp.eval_php
    rows = (
        {"Property": "PHP Version", "Value": php("echo PHP_VERSION;").strip()},
        {"Property": "MySQL Version", "Value": site.db.scalar("SELECT VERSION()")},
        {"Property": "WordPress Version", "Value": site.wp.run("core", "version").strip()},
        {"Property": "Max Execution Time",
         "Value": php("echo ini_get('max_execution_time');").strip() + "s"},
        {"Property": "Memory Limit", "Value": php("echo ini_get('memory_limit');").strip()},
    )
    return Data(TabularResult(columns=("Property", "Value"), rows=rows))


@inspector("commands", "Lists all available commands")
def commands(site):
    rows = [row for row in catalogue() if row["Command"] != "commands"]
    return Data(TabularResult(columns=("Command", "Description"), rows=tuple(rows)))
