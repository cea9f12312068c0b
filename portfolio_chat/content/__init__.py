"""Portfolio content records and the store they are read from."""
