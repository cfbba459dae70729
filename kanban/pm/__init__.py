"""Board inventory: the story catalog, the story registry and the resource pool."""
