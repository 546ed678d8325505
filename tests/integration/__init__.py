"""
Integration Tests - Collectors Through the Public Facade.

Test Files:
    - test_metrics_collectors_end_to_end.py: Operations to backend metrics
    - test_config_driven_collectors.py: Facade built from YAML config
"""
