"""Routing — pattern compilation, specificity ordering and route tables.

Route tables are built once from a ``{pattern: provider}`` mapping and are
read-only afterwards; matching is a first-match scan in specificity order.
"""
