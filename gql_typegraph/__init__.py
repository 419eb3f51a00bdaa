"""GraphQL type-graph expansion and selection-set synthesis."""
