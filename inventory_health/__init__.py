"""Inventory state and analytics engine for stockout prediction dashboards."""

__version__ = "0.1.0"
