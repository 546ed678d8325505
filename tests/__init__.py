"""
Test Suite for metricbuddy.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Facade-level tests through the public API
    - performance/: Lookup and dispatch timing bounds
    - fixtures/: Shared interfaces, sample config and profiles

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/metricbuddy            # With coverage
"""
