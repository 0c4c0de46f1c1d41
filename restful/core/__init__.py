"""Settings and structured errors."""
