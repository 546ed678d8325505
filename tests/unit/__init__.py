"""
Unit Tests - Testing Individual Components in Isolation.

Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_declarations.py: Markers and interface reading
    - test_classifier.py / test_validator.py: Kinds and shapes
    - test_generator.py: Dispatch tables and generated classes
    - test_collector_registry.py / test_keyed_cache.py: Memoization
    - test_metric_registry.py / test_prometheus_reporter.py: Adapters
    - test_config_loader.py: Configuration loading/validation
"""
