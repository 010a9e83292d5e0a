"""Domain modules: road graph, isoline extraction and the isochrone pipeline."""
