"""Core installation reconciliation services."""
