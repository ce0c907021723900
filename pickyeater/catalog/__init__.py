"""
Business catalog package.

Responsibilities:
- Map Yelp search payloads into canonical Business records.
- Ingest saved search responses into a cleaned local CSV snapshot.
- Serve that snapshot as the candidate list when no live results are supplied.
"""
