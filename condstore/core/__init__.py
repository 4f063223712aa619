"""Core condition-store primitives (entries, providers, the ordered table, iteration).

Kept free of FastAPI and redis concerns so it can be embedded by a script evaluator,
the HTTP inspection app, and tests alike.
"""
