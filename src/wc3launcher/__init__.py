"""Launcher for the wc3proxy worker."""
