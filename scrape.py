#!/usr/bin/env python3
"""
Scrape new concert announcements from the Live Nation Belgium press site.

Each run:
- discovers concert pages on the listing (clicking "meer laden" a few times)
- extracts dates, venues and the press contact of every page not yet in concerts.json
- saves the merged ledger, sorted by first date
- syncs the ledger to Google Sheets (when configured)
"""

import argparse
import sys
import traceback

from concert_scraper.browser import BrowserSession
from concert_scraper.config import load_config, missing_settings
from concert_scraper.llm import Extractor
from concert_scraper.pipeline.io import load_existing_status, save_status, utc_timestamp
from concert_scraper.pipeline.ledger import LedgerStore
from concert_scraper.pipeline.reconcile import Reconciler
from concert_scraper.pipeline.run import run_pipeline
from concert_scraper.pipeline.runlog import RunLog
from concert_scraper.sheets import SheetsClient


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Scrape new concerts and sync them to Google Sheets")
    parser.add_argument("--max-load-more", type=int, default=None, help="Max 'meer laden' clicks on the listing")
    parser.add_argument("--no-sheets", action="store_true", help="Only update the local ledger")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    return parser.parse_args(argv)


def build_reconciler(cfg, log):
    if not cfg.sheets.enabled:
        log("Google Sheets sync skipped: missing GOOGLE_SPREADSHEET_ID or service account", "WARNING")
        return None
    client = SheetsClient.from_config(cfg.sheets, log_func=log)
    return Reconciler(client, cfg.sheets.sheet_name, log_func=log)


def main(argv=None):
    args = parse_args(sys.argv[1:] if argv is None else argv)
    cfg = load_config()
    if args.max_load_more is not None:
        cfg.max_load_more_clicks = args.max_load_more
    if args.headed:
        cfg.headless = False

    log = RunLog(cfg.log_path)
    run_timestamp = utc_timestamp()
    log(f"Starting scrape run at {run_timestamp}")

    missing = missing_settings(cfg)
    if missing:
        log(f"Missing settings: {', '.join(missing)}", "WARNING")

    # Preserve last successful run info from the previous status file
    existing_status = load_existing_status(cfg.status_path)
    status = {"last_run": run_timestamp, "success": False, "error": None}
    if existing_status.get("last_success"):
        status["last_success"] = existing_status["last_success"]

    exit_code = 0
    try:
        extractor = Extractor(cfg.openai, log_func=log)
        ledger = LedgerStore(cfg.output_path, r2_config=cfg.r2, log_func=log)
        reconciler = None if args.no_sheets else build_reconciler(cfg, log)

        with BrowserSession(headless=cfg.headless, settle_delay_ms=cfg.settle_delay_ms, log_func=log) as browser:
            metrics = run_pipeline(cfg, browser, extractor, ledger, reconciler=reconciler, log=log)

        log("")
        for line in metrics.summary_lines():
            log(line)

        status.update({
            "success": True,
            "last_success": run_timestamp,
            "links_found": metrics.links_found,
            "new_links": metrics.new_links,
            "records_built": metrics.records_built,
            "errors": metrics.errors,
            "error_messages": metrics.error_messages,
            "sheet_added": metrics.sheet_added,
            "sheet_updated": metrics.sheet_updated,
        })
    except Exception as e:
        log(f"Main process error: {e}", "ERROR")
        log(f"Traceback:\n{traceback.format_exc()}", "ERROR")
        status["error"] = str(e)
        status["error_trace"] = traceback.format_exc()
        exit_code = 1
    finally:
        save_status(cfg.status_path, status)
        log(f"Status saved to {cfg.status_path}")
        log.save()

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
