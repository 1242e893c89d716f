"""
SITREP — geospatial activity engine for the situation-awareness dashboard.

Entry point: python -m sitrep.main

Provides:
- Named map projections into canvas-percent space (geo/projection)
- Static entity catalogs: hotspots, chokepoints, bases, cables (geo/catalogs)
- Keyword activity scoring per entity kind (fusion/scoring)
- Declarative layer visibility and country shading (fusion/layers)
- Overlay composition for one render pass (fusion/composer)
- View/zoom/pan state and popup dispatch (view/)
- Feed clients and the Qt refresh scheduler (ingest/)
"""
