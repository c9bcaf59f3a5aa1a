"""Teamspace: accounts, workspaces and invitation-based membership."""

__version__ = "0.1.0"
