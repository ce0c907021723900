"""
PickyEater restaurant matching service.

Responsibilities:
- Filter and rank search-provider businesses against a user's preferences.
- Store per-user preferences and memoize ranked pages until they change.
- Expose matching, preferences and operator stats over HTTP.
"""
