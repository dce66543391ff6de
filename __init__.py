"""
Meeting Scheduler - Cross-timezone meeting scheduling service

This package provides a scheduling service that:
- Maps each participant's local working hours onto UTC
- Finds common working windows and free slots for a group
- Books meetings after working-hours and double-booking checks
- Reports conflicts with ranked alternative slots
"""

__version__ = "1.0.0"
__author__ = "Meeting Scheduler Team"
