'''
Price Transparency Backend Test Suite

Test Modules:
-------------
- test_cache.py: TTL cache expiry, per-entry lifetimes, deterministic keys
- test_merge.py: Provider enrichment and highest-confidence price merge
- test_statistics.py: Rounded averages, nearest-rank price range, drug quote ordering
- test_filtering.py: Provider/price/plan filters, stable sorts, pagination
- test_aggregator.py: Cache-fronted fan-out, fail-fast and partial policies,
  travel cost arithmetic, wearable dispatch
- test_api.py: Envelope contract, validation codes and end-to-end scenarios
- test_http_sources.py: NPI Registry, ClinicalTrials.gov and openFDA clients
- test_client.py: Async API client, de-duplication windows, freshness labels

Running Tests:
--------------
    pytest price_transparency/tests
    pytest -m e2e                # end-to-end scenarios only
'''
