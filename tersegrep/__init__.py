"""
tersegrep - token-frugal heuristic code search.

Modules:
- config: environment-based tunables
- logger: stderr logging and the exception hierarchy
- search: query model, walker, scoring, aggregation, ranking, rendering
- tracking: usage history store
- gain: savings report
"""
