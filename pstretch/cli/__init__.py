# pstretch/cli/__init__.py

"""
Command-line interface for pstretch (Click).
"""
