"""Application layer – rate limiting, quota accounting, file checks and uploads."""
