"""Signals the cells app emits for notification delivery elsewhere.

Receivers get plain rows as produced by the analytics services.
"""
from django.dispatch import Signal

# kwargs: row (member streak row with cell_group_name)
member_needs_follow_up = Signal()

# kwargs: row (visitor recurrence row)
repeat_visitor_detected = Signal()
