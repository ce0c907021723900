"""
User preference storage.

Responsibilities:
- Keep each user's saved dietary, cuisine, price, rating and distance settings.
- Notify subscribers (e.g. the match cache) whenever a user's preferences change.
"""
