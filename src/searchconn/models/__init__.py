"""Data models shared by the search clients."""
