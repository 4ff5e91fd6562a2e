'''
Funnel Compass Backend Test Suite

Test Modules:
-------------
- test_metric_derivation.py: 12 guarded formulas, recompute-on-write, reverse chain
- test_benchmarks.py: Static table, read-only views, range-band classification
- test_gap_analysis.py: Direction-aware status, priority, bottleneck, health
- test_projections.py: Stage chain, assumption precedence, scenarios, timeline
- test_effective_value.py: Upsell-weighted projection and the strategy interface
- test_formatting.py: en-IN grouping and per-metric units
- test_records.py: Record lookups against a mocked asyncpg connection
- test_database.py: Pool lifecycle and the connection dependency
- test_recommendations.py: Prompt, reply parsing, Gemini call via MockTransport
- test_api.py: Every route through the FastAPI TestClient

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

No database or network is needed; see conftest.py for the fixtures that
stand in for both.
'''

__all__ = []
