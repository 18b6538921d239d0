"""
Frontload: coordinated data loading for composable render trees.

Nodes declare the data they need; server renders are iterated until every
fetch discovered along the way has settled, client renders run fetches
directly once the first render has committed.
"""

__version__ = "0.1.0"
