"""Delivery channels understood by the legacy notifications API."""

EMAIL = "email"
