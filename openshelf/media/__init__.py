"""Remote libraries, catalog providers and folder name parsing."""
