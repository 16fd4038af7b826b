"""
Alert history enrichment for Nagios notifications.

Answers "how often has this alert fired recently?" from Splunk alert logs.
"""

__version__ = '1.0.0'
