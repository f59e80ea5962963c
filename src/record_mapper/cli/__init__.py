"""Command-line tooling for inspecting record mappings."""
