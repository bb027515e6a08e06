"""Pipeline stages: classify, derive key, resolve, build response."""
