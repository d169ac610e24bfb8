"""gymlog analytics: derived statistics over a workout session log."""
