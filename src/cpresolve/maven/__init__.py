"""Maven descriptor generation, invocation and output parsing."""
