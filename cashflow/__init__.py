"""
CashFlow Habits - Source Package

The habit side of a personal finance and habit-tracking app.
Turns a habit's log of completion timestamps into period progress,
streaks and cumulative totals.

DESIGN PRINCIPLES:
1. The engine reads, the tracker writes, storage lives elsewhere
2. Fail early, fail visibly (no silent default period)
3. Time is an input, never read from the ambient clock
4. Every user action is auditable
"""

__version__ = "1.0.0"
__author__ = "CashFlow Team"
