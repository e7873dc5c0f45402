"""Notebook pages of the Deskpad window."""
