"""Natural-language geographic query resolution."""
