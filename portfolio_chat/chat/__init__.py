"""Chat pipeline: context assembly and the request-level service."""
