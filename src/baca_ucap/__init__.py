"""Spoken word matching for the Baca & Ucap reading game."""
