"""Local-first dashboard client: cache, remote sync and the mutation pipeline."""
