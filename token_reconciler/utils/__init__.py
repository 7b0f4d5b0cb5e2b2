"""
Utility functions module.

Time Semantics:
- All window timestamps are integer epoch milliseconds
- Callers may pass an explicit `now`; wall-clock time is only the fallback
"""
