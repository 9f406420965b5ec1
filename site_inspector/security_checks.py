"""Security-oriented inspectors: theme hardening, XML-RPC, known vulnerabilities."""

import glob
import logging
import os

import requests

from site_inspector.registry import inspector
from site_inspector.result import Advisory, Data, Empty, Failure, TabularResult, tabulate

logger = logging.getLogger(__name__)

VULN_COLUMNS = ("title", "fixed_in", "cve", "description")


@inspector("check-abspath", "Checks for ABSPATH usage in theme files")
def check_abspath(site):
    theme_dir = os.path.join(site.content_dir, "themes")
    rows = []
    for path in sorted(glob.glob(os.path.join(glob.escape(theme_dir), "*", "*.php"))):
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                if "ABSPATH" in f.read():
                    continue
        except OSError as exc:
            logger.debug("Skipping unreadable theme file %s: %s", path, exc)
            continue
        rows.append({"file": os.path.relpath(path, site.root), "status": "No ABSPATH check"})
    return tabulate(("file", "status"), rows, "All theme files use ABSPATH correctly.")


def _php_truthy(value) -> bool:
    return value not in (None, False, 0, "", "0")


@inspector("check-xmlrpc", "Checks if XML-RPC is disabled")
def check_xmlrpc(site):
    enabled = site.wp.option("enable_xmlrpc")
    constant = site.wp.eval_php(
        "echo (defined('XMLRPC_REQUEST') && XMLRPC_REQUEST) ? '1' : '0';"
    ).strip()
    if not _php_truthy(enabled) or constant == "1":
        return Empty("XML-RPC is disabled.")
    return Advisory("XML-RPC is enabled. Consider disabling it for security reasons.")


def _vulnerability_row(vuln: dict) -> dict:
    row = {c: vuln.get(c) for c in VULN_COLUMNS if c in vuln}
    if "cve" not in row:
        cves = (vuln.get("references") or {}).get("cve") or []
        row["cve"] = ", ".join(f"CVE-{c}" if not str(c).startswith("CVE") else str(c) for c in cves)
    return row


def _extract_vulnerabilities(body, version: str) -> list:
    """Accept both a flat body and the API's version-keyed body."""
    if not isinstance(body, dict):
        return []
    if "vulnerabilities" in body:
        return body["vulnerabilities"] or []
    release = body.get(version)
    if isinstance(release, dict):
        return release.get("vulnerabilities") or []
    return []


@inspector("check-vuln", "Checks for known vulnerabilities in WordPress core")
def check_vuln(site):
    token = site.config.wpscan_api_token
    if not token:
        return Failure("WPScan API token is not configured (set WPSCAN_API_TOKEN).")

    version = site.wp.run("core", "version").strip()
    url = f"{site.config.wpscan_url.rstrip('/')}/{version.replace('.', '')}"
    try:
        response = site.http.get(
            url,
            headers={"Authorization": f"Token token={token}"},
            timeout=site.config.http_timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.debug("Vulnerability lookup failed: %s", exc)
        return Failure("Error retrieving vulnerability data.")
    try:
        body = response.json()
    except ValueError:
        return Failure("Vulnerability API returned invalid JSON.")

    vulnerabilities = _extract_vulnerabilities(body, version)
    if not vulnerabilities:
        return Empty(f"No vulnerabilities found for WordPress {version}")

    rows = tuple(_vulnerability_row(v) for v in vulnerabilities if isinstance(v, dict))
    return Data(
        TabularResult(columns=VULN_COLUMNS, rows=rows),
        warning="Known vulnerabilities found:",
    )
