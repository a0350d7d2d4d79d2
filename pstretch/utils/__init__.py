# pstretch/utils/__init__.py

"""
Utility modules (logging setup, console progress rendering).
"""
