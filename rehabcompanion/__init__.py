"""Rehab companion backend."""
