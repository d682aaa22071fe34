"""Conversational lead qualification for a single property listing."""
