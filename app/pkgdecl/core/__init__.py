"""Core reconciliation logic: paths, configuration, groups, and the diff aggregator."""
