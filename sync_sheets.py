#!/usr/bin/env python3
"""
Push the local concerts.json ledger to Google Sheets without scraping.

Modes:
- sync:    append new concerts, rewrite rows whose data changed (default)
- append:  only append concerts whose URL isn't in the sheet yet
- replace: clear the tab and write everything again
"""

import argparse
import sys
from pathlib import Path

from concert_scraper.config import load_config
from concert_scraper.errors import ScraperError
from concert_scraper.pipeline.ledger import LedgerStore
from concert_scraper.pipeline.reconcile import Reconciler
from concert_scraper.pipeline.runlog import print_log
from concert_scraper.sheets import SheetsClient


def check_service_account(client, log=print_log):
    """Print the service account email and how to share the spreadsheet with it."""
    email = client.service_account_email
    if not email:
        log("Could not determine the service account email", "WARNING")
        return False
    log(f"Service Account Email: {email}")
    log("")
    log("To give the scraper access:")
    log("1. Open your Google Spreadsheet")
    log('2. Click the "Share" button (top right)')
    log(f"3. Add this email: {email}")
    log('4. Set permission to "Editor"')
    return True


def run_sync(cfg, mode="sync", ledger_path=None, client=None, log=print_log):
    """
    Sync the ledger to the sheet. Returns {"added", "updated"} or None when the ledger is empty.
    The R2 mirror only backs the configured ledger; an explicit ledger_path is read as-is.
    """
    path = Path(ledger_path) if ledger_path else cfg.output_path
    r2_config = cfg.r2 if path == Path(cfg.output_path) else None
    ledger = LedgerStore(path, r2_config=r2_config, log_func=log)
    records = ledger.load()
    if not records:
        log(f"No concerts found in {ledger.path}")
        return None

    log(f"Found {len(records)} concerts to {mode} to Google Sheets")
    client = client or SheetsClient.from_config(cfg.sheets, log_func=log)
    reconciler = Reconciler(client, cfg.sheets.sheet_name, log_func=log)

    if mode == "append":
        result = reconciler.append_new(records)
    elif mode == "replace":
        result = reconciler.replace_all(records)
    else:
        result = reconciler.sync(records)

    log(f"View your data at: {client.url}")
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Sync concerts.json to Google Sheets")
    parser.add_argument("--mode", choices=["sync", "append", "replace"], default="sync")
    parser.add_argument("--ledger", default=None, help="Path to concerts.json")
    parser.add_argument("--check", action="store_true", help="Show the service account to share the sheet with")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    cfg = load_config()
    try:
        if args.check:
            return 0 if check_service_account(SheetsClient.from_config(cfg.sheets)) else 1
        run_sync(cfg, mode=args.mode, ledger_path=Path(args.ledger) if args.ledger else None)
    except ScraperError as e:
        print_log(f"Google Sheets {args.mode} failed: {e}", "ERROR")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
