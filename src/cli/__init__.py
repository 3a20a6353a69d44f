"""
Rewatch Command Line Package.

Requires Python 3.11+.
"""
