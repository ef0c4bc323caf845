"""Logging setup for searchconn."""
