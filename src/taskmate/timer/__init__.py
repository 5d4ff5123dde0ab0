"""
Focus timer.

- ticker.py: cancellable repeating tick handles (asyncio-backed)
- focus_timer.py: the countdown state machine bound to at most one task
"""
