"""HTTP client for the remote experiment store"""
