"""Business logic: accounts, workspaces, invitations and email."""
