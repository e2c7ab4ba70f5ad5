"""Core (UI-agnostic) dashboard logic.

This package contains:
- raw GraphQL record parsing (JSON -> typed records)
- selection normalization
- window filtering and the three chart projections (pure render models)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
