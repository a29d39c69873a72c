"""Transcript evaluators."""
