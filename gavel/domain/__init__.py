"""Domain layer for Gavel.

Pure business types: meeting, attendance, ballot, proxy, policy and token
models, the governance access tables, and the typed error hierarchy.
Nothing in this package performs I/O or imports from outer layers.
"""
