"""ProfileController - Foreground owner of the visible elevation profile.

Connects the collaborators of the profile engine:

1. Route model notifies route_changed(); geometry changes schedule a
   debounced terrain build, metadata changes only re-project
2. Terrain source notifies elevation_updated() when new data is available
3. Viewport calls set_visible() and resize()
4. Simulator feeds aircraft_changed() / disconnected_from_simulator()
5. Mouse hover calls probe(x), leaving the widget calls leave()

The visible ElevationLegList and ProjectionState are swapped as a pair
under a lock, so readers never observe a half-updated profile.
"""

import logging
import threading
from typing import Callable, Optional, Protocol, Sequence

from flightprofile.constants import ProfileConfig
from flightprofile.core.aircraft_progress import AircraftProgress
from flightprofile.core.cancellation import CancellationToken
from flightprofile.core.leg_builder import LegBuilder
from flightprofile.core.profile_assembler import ProfileAssembler
from flightprofile.core.query_engine import QueryEngine
from flightprofile.core.screen_projector import ScreenProjector
from flightprofile.core.terrain_sampler import HeightProfileSource, TerrainSampler
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.position import Position
from flightprofile.model.probe import ProbeResult
from flightprofile.model.projection import ProjectionState
from flightprofile.model.waypoint import RouteWaypoint
from flightprofile.ui.update_scheduler import UpdateScheduler

logger = logging.getLogger(__name__)


class RouteSource(Protocol):
    """External route/flight plan collaborator."""

    def waypoints(self) -> Sequence[RouteWaypoint]: ...

    @property
    def cruise_altitude_ft(self) -> float: ...

    def is_empty(self) -> bool: ...


class ProfileController:
    """Keeps the elevation profile consistent with a live route.

    Example:
        controller = ProfileController(route=route, terrain=DEMService(), width=1000, height=300)
        controller.set_visible(True)
        controller.route_changed(geometry_changed=True)
        result = controller.probe(x=400)
        controller.shutdown()
    """

    def __init__(
        self,
        route: RouteSource,
        terrain: HeightProfileSource,
        width: int,
        height: int,
        debounce_s: float = ProfileConfig.UPDATE_TIMEOUT_S,
        on_update: Optional[Callable[[], None]] = None,
        on_highlight: Optional[Callable[[Position], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """Initialize controller, hidden and with an empty profile.

        Args:
            route: Route model
            terrain: Height profile source, called from the worker thread
            width: Viewport width in pixels
            height: Viewport height in pixels
            debounce_s: Delay before a burst of changes triggers a build
            on_update: Called whenever the visible profile needs a repaint
            on_highlight: Called with the probed position, or the invalid
                position when the highlight is cleared
            on_error: Called from the worker thread when a build fails, for
                example with RouteContractError for a waypoint without position
        """
        self.route = route
        self.width = width
        self.height = height
        self.on_update = on_update
        self.on_highlight = on_highlight
        self.on_error = on_error

        self.assembler = ProfileAssembler(leg_builder=LegBuilder(sampler=TerrainSampler(source=terrain)))
        self.projector = ScreenProjector()
        self.query_engine = QueryEngine()
        self.scheduler: UpdateScheduler[ElevationLegList] = UpdateScheduler(
            compute=self._compute,
            on_result=self._apply_result,
            debounce_s=debounce_s,
            on_error=self._report_error,
        )

        self._lock = threading.RLock()
        self._leg_list = ElevationLegList()
        self._projection: Optional[ProjectionState] = None
        self._aircraft = Position.invalid()
        self._aircraft_shown = False
        self._aircraft_distance_nm: Optional[float] = None
        self.highlight = Position.invalid()
        self.info_text = ProfileConfig.NO_INFO_TEXT

    # =========================================================================
    # Visible state
    # =========================================================================

    @property
    def leg_list(self) -> ElevationLegList:
        return self._leg_list

    @property
    def projection(self) -> Optional[ProjectionState]:
        """Current projection, None means render the "No Route loaded." placeholder."""
        return self._projection

    @property
    def visible(self) -> bool:
        return self.scheduler.visible

    @property
    def aircraft_distance_nm(self) -> Optional[float]:
        return self._aircraft_distance_nm

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.scheduler.last_error

    def snapshot(self) -> tuple[ElevationLegList, Optional[ProjectionState]]:
        """Return the visible profile and its projection as a consistent pair."""
        with self._lock:
            return self._leg_list, self._projection

    # =========================================================================
    # Background computation
    # =========================================================================

    def _compute(self, token: CancellationToken) -> Optional[ElevationLegList]:
        return self.assembler.assemble(waypoints=list(self.route.waypoints()), token=token)

    def _apply_result(self, leg_list: ElevationLegList) -> None:
        logger.info(f"Profile update finished: {leg_list!r}")
        with self._lock:
            self._leg_list = leg_list
            self._update_screen_coords()
        self._request_update()

    def _report_error(self, error: Exception) -> None:
        logger.error(f"Profile build failed, keeping previous profile: {error}")
        if self.on_error is not None:
            self.on_error(error)

    def _visible_aircraft(self) -> Optional[Position]:
        if self._aircraft_shown and self._aircraft.is_valid and not self.route.is_empty():
            return self._aircraft
        return None

    def _update_screen_coords(self) -> None:
        with self._lock:
            self._projection = self.projector.project(
                leg_list=self._leg_list,
                width=self.width,
                height=self.height,
                cruise_alt_ft=self.route.cruise_altitude_ft,
                aircraft=self._visible_aircraft(),
                aircraft_distance_nm=self._aircraft_distance_nm,
            )

    def _request_update(self) -> None:
        if self.on_update is not None:
            self.on_update()

    # =========================================================================
    # Collaborator notifications
    # =========================================================================

    def route_changed(self, geometry_changed: bool) -> None:
        """Route model changed.

        Args:
            geometry_changed: True if waypoints moved, were added or removed.
                False for metadata changes like the cruise altitude.
        """
        if not self.visible:
            return

        if geometry_changed:
            logger.debug("Profile route geometry changed")
            self.scheduler.schedule()
        else:
            self._update_screen_coords()
            self._request_update()

    def elevation_updated(self) -> None:
        """Terrain source has new data available."""
        if not self.visible:
            return
        logger.debug("Profile update elevation")
        self.scheduler.schedule()

    def set_visible(self, visible: bool) -> None:
        """Widget shown or hidden. Showing refreshes the profile immediately."""
        self.scheduler.set_visible(visible)

    def resize(self, width: int, height: int) -> None:
        """Viewport size changed."""
        with self._lock:
            self.width = width
            self.height = height
            self._update_screen_coords()
        self._request_update()

    def aircraft_changed(self, position: Position, shown: bool = True) -> None:
        """New simulator aircraft position.

        Args:
            position: Aircraft position, altitude in feet
            shown: False if the aircraft layer is switched off
        """
        if shown and position.is_valid and not self.route.is_empty():
            with self._lock:
                self._aircraft = position
                self._aircraft_shown = True
                self._aircraft_distance_nm = AircraftProgress.distance_from_start_nm(
                    waypoints=self._leg_list.waypoints or tuple(self.route.waypoints()), position=position
                )
                # Re-projecting moves the marker and raises the axis if the aircraft climbs above it
                self._update_screen_coords()
            self._request_update()
        else:
            with self._lock:
                was_valid = self._aircraft.is_valid
                self._aircraft = Position.invalid()
                self._aircraft_shown = False
                self._aircraft_distance_nm = None
                if was_valid:
                    self._update_screen_coords()
            if was_valid:
                self._request_update()

    def disconnected_from_simulator(self) -> None:
        """Simulator connection lost, remove the aircraft."""
        with self._lock:
            self._aircraft = Position.invalid()
            self._aircraft_shown = False
            self._aircraft_distance_nm = None
            self._update_screen_coords()
        self._request_update()

    # =========================================================================
    # Interaction
    # =========================================================================

    def probe(self, x: int) -> Optional[ProbeResult]:
        """Mouse moved to pixel column x.

        Returns:
            ProbeResult, or None if there is no profile to query.
        """
        with self._lock:
            result = self.query_engine.probe(
                x=x,
                leg_list=self._leg_list,
                projection=self._projection,
                cruise_alt_ft=self.route.cruise_altitude_ft,
            )
        if result is None:
            return None

        self.highlight = result.position
        self.info_text = result.info_text
        if self.on_highlight is not None:
            self.on_highlight(result.position)
        return result

    def leave(self) -> None:
        """Mouse left the widget, clear the highlight."""
        self.highlight = Position.invalid()
        self.info_text = ProfileConfig.NO_INFO_TEXT
        if self.on_highlight is not None:
            self.on_highlight(self.highlight)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no profile build is pending or running."""
        return self.scheduler.wait_idle(timeout=timeout)

    def shutdown(self) -> None:
        """Cancel and join background work before teardown."""
        self.scheduler.shutdown()
