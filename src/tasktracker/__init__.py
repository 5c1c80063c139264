"""tasktracker - billable work session tracking."""
