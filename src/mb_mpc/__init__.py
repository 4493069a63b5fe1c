"""Command line client for the Music Player Daemon."""
