"""Mood Tracker Analytics API."""
