"""Terminal input and interactive navigation."""
