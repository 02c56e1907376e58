"""Pricing engine and exchange-rate providers."""
