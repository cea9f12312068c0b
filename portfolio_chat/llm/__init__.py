"""LLM client, tag classifier, prompt rendering and answer generation."""
