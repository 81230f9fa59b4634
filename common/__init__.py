"""
Common — shared value types, error kinds, logging and small helpers.
"""
