"""Fetching, merging and bucketing of conversation lists."""
