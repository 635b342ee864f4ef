"""Presentation services for the EdgeRunner Kelly calculator."""
