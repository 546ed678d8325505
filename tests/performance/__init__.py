"""
Performance Tests.

Bounds for metricbuddy:
    - Cached collector lookup: 10,000 lookups < 1 second
    - Generated operation dispatch: 50,000 calls < 2 seconds
"""
