"""Configuration for searchconn."""
