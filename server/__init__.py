"""Mood Tracker HTTP services."""
