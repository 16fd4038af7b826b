# herald/config/__init__.py
"""
Search endpoint and timeout configuration.
"""
