"""Alternate-world civilization and geopolitics simulator core."""
