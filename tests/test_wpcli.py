"""Tests for site_inspector/wpcli.py"""

import subprocess
import unittest
from unittest.mock import MagicMock, patch

from site_inspector.wpcli import Database, DatabaseError, SiteError, WpCli, WpCliError, parse_batch_output


def _completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=["wp"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseBatchOutput(unittest.TestCase):
    def test_header_and_rows(self):
        output = "option_name\tsize\nsiteurl\t22\nactive_plugins\t1043\n"
        self.assertEqual(parse_batch_output(output), [
            {"option_name": "siteurl", "size": "22"},
            {"option_name": "active_plugins", "size": "1043"},
        ])

    def test_null_becomes_none(self):
        output = "ID\tpost_date\n7\tNULL\n"
        self.assertEqual(parse_batch_output(output), [{"ID": "7", "post_date": None}])

    def test_escapes_decoded(self):
        output = "message\nline one\\nline two\\twith tab \\\\ backslash\n"
        self.assertEqual(
            parse_batch_output(output)[0]["message"],
            "line one\nline two\twith tab \\ backslash",
        )

    def test_empty_output(self):
        self.assertEqual(parse_batch_output(""), [])

    def test_header_only(self):
        self.assertEqual(parse_batch_output("ID\tuser_login\n"), [])

    def test_empty_single_column_value_kept(self):
        self.assertEqual(
            parse_batch_output("option_value\n\nsecond\n"),
            [{"option_value": ""}, {"option_value": "second"}],
        )


class TestWpCli(unittest.TestCase):
    @patch("site_inspector.wpcli.subprocess.run")
    def test_run_appends_path(self, mock_run):
        mock_run.return_value = _completed("6.5.2\n")
        wp = WpCli(binary="wp", path="/var/www/html", timeout=30)

        self.assertEqual(wp.run("core", "version"), "6.5.2\n")
        command = mock_run.call_args[0][0]
        self.assertEqual(command, ["wp", "core", "version", "--path=/var/www/html"])
        self.assertEqual(mock_run.call_args[1]["timeout"], 30)

    @patch("site_inspector.wpcli.subprocess.run")
    def test_non_zero_exit_raises(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="Error: This does not seem to be a WordPress installation.")
        with self.assertRaises(WpCliError) as ctx:
            WpCli().run("core", "version")
        self.assertIn("does not seem to be a WordPress installation", str(ctx.exception))

    @patch("site_inspector.wpcli.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_binary_raises(self, _):
        with self.assertRaises(SiteError):
            WpCli(binary="/nope/wp").run("core", "version")

    @patch("site_inspector.wpcli.subprocess.run",
           side_effect=subprocess.TimeoutExpired(cmd="wp", timeout=1))
    def test_timeout_raises(self, _):
        with self.assertRaises(WpCliError):
            WpCli(timeout=1).run("cron", "event", "list")

    @patch("site_inspector.wpcli.subprocess.run")
    def test_json(self, mock_run):
        mock_run.return_value = _completed('[{"hook": "wp_version_check", "time": 1718000000}]')
        events = WpCli().json("cron", "event", "list")
        self.assertEqual(events[0]["hook"], "wp_version_check")
        self.assertIn("--format=json", mock_run.call_args[0][0])

    @patch("site_inspector.wpcli.subprocess.run")
    def test_invalid_json_raises(self, mock_run):
        mock_run.return_value = _completed("<html>")
        with self.assertRaises(WpCliError):
            WpCli().json("plugin", "list")

    @patch("site_inspector.wpcli.subprocess.run")
    def test_succeeds(self, mock_run):
        mock_run.return_value = _completed(returncode=1)
        self.assertFalse(WpCli().succeeds("plugin", "is-active", "woocommerce"))
        mock_run.return_value = _completed(returncode=0)
        self.assertTrue(WpCli().succeeds("plugin", "is-active", "woocommerce"))

    @patch("site_inspector.wpcli.subprocess.run")
    def test_missing_option_gives_default(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="Error: Could not get 'enable_xmlrpc' option.")
        self.assertEqual(WpCli().option("enable_xmlrpc", "fallback"), "fallback")

    @patch("site_inspector.wpcli.subprocess.run")
    def test_option_decoded(self, mock_run):
        mock_run.return_value = _completed('["elementor/elementor.php","woocommerce/woocommerce.php"]')
        self.assertEqual(
            WpCli().option("active_plugins"),
            ["elementor/elementor.php", "woocommerce/woocommerce.php"],
        )


class TestDatabase(unittest.TestCase):
    def setUp(self):
        self.wp = MagicMock(spec=WpCli)
        self.db = Database(self.wp)

    def test_prefix_looked_up_once(self):
        self.wp.run.return_value = "wp_\n"
        self.assertEqual(self.db.table("options"), "wp_options")
        self.assertEqual(self.db.table("posts"), "wp_posts")
        self.wp.run.assert_called_once_with("db", "prefix")

    def test_query_parses_batch_output(self):
        self.wp.run.return_value = "post_type\tpost_status\tcount\npost\tpublish\t12\n"
        records = self.db.query("SELECT ...")
        self.assertEqual(records, [{"post_type": "post", "post_status": "publish", "count": "12"}])
        self.wp.run.assert_called_once_with("db", "query", "SELECT ...")

    def test_query_failure_is_database_error(self):
        self.wp.run.side_effect = WpCliError("wp db failed: Table 'wp_actionscheduler_actions' doesn't exist")
        with self.assertRaises(DatabaseError):
            self.db.query("SELECT action FROM wp_actionscheduler_actions")

    def test_scalar(self):
        self.wp.run.return_value = "COUNT(ID)\n42\n"
        self.assertEqual(self.db.scalar("SELECT COUNT(ID) FROM wp_users"), "42")

    def test_scalar_no_rows(self):
        self.wp.run.return_value = ""
        self.assertIsNone(self.db.scalar("SELECT 1"))


if __name__ == "__main__":
    unittest.main()
