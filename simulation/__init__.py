"""Market simulation: instrument catalog, price generator, ledger, persistence and session."""
