"""Core domain: levels, entries, buffering, timing."""
