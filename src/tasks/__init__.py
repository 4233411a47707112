"""Task lifecycle: creation, updates, assignment, time tracking, status."""
