"""Seed data for the registration code pools."""
