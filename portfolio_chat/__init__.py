"""Portfolio chat: retrieval-augmented answers about a portfolio owner."""
