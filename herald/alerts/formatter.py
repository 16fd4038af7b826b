"""
Render a FrequencyReport as a one-line summary for notifications.

Example:
    HOST 'web0200.ny4' has experienced 3 CRITICAL alerts, 1 WARNING alerts
    for SERVICE 'Disk Space' in the last 7 days.
"""

from typing import Any

from herald.alerts.models import AggregatedCounts, FrequencyReport


def format_period(duration: Any) -> str:
    """'1 day' for exactly one day, 'N days' for anything else."""
    try:
        singular = float(duration) == 1
    except (TypeError, ValueError):
        singular = False
    unit = "day" if singular else "days"
    return f"{duration} {unit}"


def format_counts(counts: AggregatedCounts) -> str:
    if not counts:
        return "0 alerts"
    return ", ".join(f"{c.count} {c.state} alerts" for c in counts)


def format_report(report: FrequencyReport) -> str:
    msg = f"HOST '{report.hostname}' has experienced {format_counts(report.counts)}"
    if report.service is not None:
        msg += f" for SERVICE '{report.service}'"
    msg += f" in the last {report.period}."
    return msg
