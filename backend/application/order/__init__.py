"""Order application layer: commands, queries, orchestrators, event handlers."""
