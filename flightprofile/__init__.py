"""Flight Profile - Terrain elevation profiles for flight routes.

Turns an ordered flight route into a terrain elevation profile for
interactive rendering:
- Background terrain sampling with altitude-based thinning
- Debounced, cancellable, single-flight recomputation on route changes
- Pixel projection with pixel-based thinning
- Pixel to route position queries for mouse probing

Modules:
    core: Geo calculations, DEM access, leg building, projection, queries
    model: Data structures (Position, RouteWaypoint, ElevationLeg, ProjectionState)
    ui: Scheduler state machine, profile controller, Plotly chart

Example:
    from flightprofile.core import DEMService
    from flightprofile.ui import ProfileController
"""
