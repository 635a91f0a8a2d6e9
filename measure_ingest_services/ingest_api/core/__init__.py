"""Core layer - domain, validation, aggregation and pipeline.

No HTTP or SQL details live here; stores are reached through protocols.
"""
