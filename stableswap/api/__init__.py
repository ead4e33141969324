"""HTTP API for the stableswap simulation service."""
