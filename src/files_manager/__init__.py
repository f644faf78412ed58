"""
Files Manager API.

User registration, token authentication and file/folder metadata management
with payloads stored on the local filesystem.
"""
