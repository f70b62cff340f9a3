"""Utility helpers shared across the package exporter."""
