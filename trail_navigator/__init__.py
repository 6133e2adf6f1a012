"""Trail Navigator - Geodesic navigation core for outdoor route following.

Features:
- Coordinate notations (DD, DMS, DDM, UTM, MGRS) parsed and formatted
- Great-circle distance, bearing and cross-track math on a spherical Earth
- Snap-to-track with a bounded search window for long routes
- Remaining distance, climb and Naismith ETA
- Debounced off-track detection driven by GPS quality
- State machine-based navigation session (route and compass modes)

Modules:
    core: Pure algorithms (geometry, projections, codecs, snapping, progress)
    model: Data structures (Coordinate, SnapResult, NavigationProgress, events)
    routing: External routing service contract (Valhalla)
    session: Navigation state machine and session facade

Example:
    from trail_navigator.core import CoordinateTranscoder, GeoCalculator
    from trail_navigator.session import NavigationSession
"""
