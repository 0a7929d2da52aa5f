"""Conversation list cache."""
