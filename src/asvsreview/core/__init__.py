"""Detection engine: rule catalog, matchers, aggregation and reporting."""
