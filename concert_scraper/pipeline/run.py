import time

from concert_scraper.discover import LinkDiscoverer, select_new_candidates
from concert_scraper.errors import ConfigurationError
from concert_scraper.pipeline.build import build_records
from concert_scraper.pipeline.io import append_error_entry
from concert_scraper.pipeline.merge import known_urls
from concert_scraper.pipeline.metrics import RunMetrics
from concert_scraper.pipeline.runlog import print_log
from concert_scraper.utils.content import normalize_page_text


def log_extraction(candidate, result, log):
    log(f"  Scraped concert: {candidate.title}")
    log(f"  Found {len(result.events)} events:")
    for event in result.events:
        log(f"  - {event.date} at {event.location}")
    if result.contact:
        log(f"  Contact: {result.contact.name} ({result.contact.email})")
    else:
        log("  No press contact found")


def scrape_candidate(candidate, browser, extractor, max_content_length, log):
    """Render one detail page, extract its events and build its records."""
    html = browser.fetch_html(candidate.url)
    text = normalize_page_text(html, max_length=max_content_length)
    result = extractor.extract(text)
    log_extraction(candidate, result, log)
    if result.is_placeholder:
        log(f"  No usable dates found for {candidate.url}", "WARNING")
    return build_records(candidate, result), result


def scrape_new_concerts(candidates, browser, extractor, cfg, metrics, log=None, sleep=time.sleep):
    """
    Process candidates one at a time with a fixed delay between them.
    A failing candidate is written to the errors file and skipped; only a
    ConfigurationError stops the loop.
    """
    log = log or print_log
    new_records = []
    total = len(candidates)

    for i, candidate in enumerate(candidates, start=1):
        try:
            records, result = scrape_candidate(candidate, browser, extractor, cfg.max_content_length, log)
        except ConfigurationError:
            raise
        except Exception as e:
            metrics.errors += 1
            metrics.error_messages.append(f"{candidate.url}: {e}")
            append_error_entry(cfg.errors_path, candidate.url, candidate.title, e, log_func=log)
            log(f"Progress: {i}/{total} ({total - i} remaining)")
        else:
            new_records.extend(records)
            metrics.processed += 1
            metrics.records_built += len(records)
            if result.is_placeholder:
                metrics.placeholders += 1
            log(
                f"Successfully scraped: {candidate.title} ({len(records)} events) - "
                f"{i}/{total} completed ({total - i} remaining)"
            )

        if i < total:
            sleep(cfg.delay_between_requests)

    return new_records


def run_pipeline(cfg, browser, extractor, ledger, reconciler=None, log=None, sleep=time.sleep):
    """
    One incremental run: discover, scrape what the ledger doesn't know yet,
    persist the merged ledger, then reconcile the whole ledger with the sheet.
    Returns RunMetrics.
    """
    log = log or print_log
    start_time = time.time()
    metrics = RunMetrics()

    existing = ledger.load()

    log("Discovering concert links...")
    candidates = LinkDiscoverer(browser, cfg, log_func=log).discover(cfg.base_url, cfg.max_load_more_clicks)
    new_candidates = select_new_candidates(candidates, known_urls(existing))
    metrics.links_found = len(candidates)
    metrics.new_links = len(new_candidates)
    log(f"Found {len(candidates)} total concert links")
    log(f"Found {len(new_candidates)} new concert links to process")

    records = existing
    if new_candidates:
        log("New concerts to scrape:")
        for candidate in new_candidates:
            log(f"- {candidate.url} ({candidate.title})")

        fresh = scrape_new_concerts(new_candidates, browser, extractor, cfg, metrics, log=log, sleep=sleep)
        records = ledger.merge(existing, fresh)
        ledger.save(records)
    else:
        log("No new concerts found")

    if reconciler is not None:
        log("\nSyncing concerts to Google Sheets...")
        result = reconciler.sync(records)
        metrics.sheet_added = result["added"]
        metrics.sheet_updated = result["updated"]

    metrics.duration_ms = (time.time() - start_time) * 1000
    return metrics
