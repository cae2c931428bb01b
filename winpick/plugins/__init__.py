"""Plugins: each one provides `run_<command>` handlers to the daemon."""
