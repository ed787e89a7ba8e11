"""Rideshare scheduling service: fare calculation and fee ledger."""
