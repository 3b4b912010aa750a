"""Survey analytics (stats dashboard).

Turns raw submissions into chart-ready breakdowns under a shared duplicate
filter. Read-only: nothing in this package writes to the store.
"""
