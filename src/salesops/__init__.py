"""Sales operations advisor: route re-assignment optimizer and lead data cleaning."""
