"""baseql-mcp command line interface."""
