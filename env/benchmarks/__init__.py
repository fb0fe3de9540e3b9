"""Timing helpers for the cart-pole learning loop."""
