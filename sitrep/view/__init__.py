"""View/zoom/pan state and popup dispatch."""
