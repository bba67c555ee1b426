"""Rules data and loaders."""
