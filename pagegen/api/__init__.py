"""Tool surface exposed to the calling agent."""
