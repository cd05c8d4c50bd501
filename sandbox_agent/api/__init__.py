"""HTTP entry point for the sandbox agent."""
