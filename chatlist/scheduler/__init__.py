"""Delayed job scheduling."""
