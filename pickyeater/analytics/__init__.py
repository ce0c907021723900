"""
Usage analytics.

Responsibilities:
- Record one event per match request (filters used, result count, timing, cache hit).
- Aggregate recorded events into a summary for operators.
"""
