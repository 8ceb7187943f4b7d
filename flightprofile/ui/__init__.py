"""Foreground side of the elevation profile engine.

- UpdateScheduler / UpdateStateMachine: Debounced, single-flight background builds
- ProfileController: Owner of the visible profile, wired to route, terrain and viewport
- ProfileChart: Plotly rendering of a projected profile
"""

from flightprofile.ui.profile_chart import ProfileChart
from flightprofile.ui.profile_controller import ProfileController, RouteSource
from flightprofile.ui.update_scheduler import UpdateContext, UpdateScheduler, UpdateStateMachine

__all__ = [
    "ProfileChart",
    "ProfileController",
    "RouteSource",
    "UpdateScheduler",
    "UpdateStateMachine",
    "UpdateContext",
]
