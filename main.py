"""site-inspector — run from a checkout without installing."""

from site_inspector.cli import run

if __name__ == "__main__":
    run()
