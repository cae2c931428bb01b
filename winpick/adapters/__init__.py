"""Adapters to the external collaborators: the compositor and the menu programs."""
