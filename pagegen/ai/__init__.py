"""Page generation pipeline: stage contracts, remote client and orchestration."""
