"""Constant definitions grouped by concern."""
