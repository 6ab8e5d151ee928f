"""Exhibit Guide — catalog browser with cached LLM-generated content."""
