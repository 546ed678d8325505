"""
Test Fixtures - Shared Test Data and Configurations.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample configuration for testing
    - config/profiles/*.yaml: Profiles merged over the sample configuration
    - interfaces: Collector interfaces used across tests
"""
