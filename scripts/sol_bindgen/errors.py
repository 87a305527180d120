"""
Generator errors

Only structural faults are exceptions; per-record problems are collected as
plain diagnostic strings on the generation result.
"""


class StructuralError(Exception):
    """Internal invariant violated during a generation pass"""
