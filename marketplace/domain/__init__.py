"""Record shapes, closed enumerations and legacy adapters."""
