"""Utility helpers for HN Reader."""
