"""Conversation creation flow."""
