"""Business logic for finance, planner and recurrence features."""
