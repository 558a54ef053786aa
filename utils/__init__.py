"""Payload adapters shared by services and routes."""
