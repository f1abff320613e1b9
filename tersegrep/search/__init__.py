"""
Heuristic code search package.

Usage:
    from tersegrep.search import query, walker, scoring, aggregate, ranking, render
    from tersegrep.search import run
"""
from tersegrep.search import query
from tersegrep.search import walker
from tersegrep.search import scoring
from tersegrep.search import aggregate
from tersegrep.search import ranking
from tersegrep.search import render
from tersegrep.search.command import run

__all__ = ["query", "walker", "scoring", "aggregate", "ranking", "render", "run"]
