# herald/utils/__init__.py
"""
Shared utilities for alert frequency reporting
"""
