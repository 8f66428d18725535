"""Tests for the board presenter: reflow dispatch, action orchestration and gating."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import FilterType, SortType, UpdateType, UserAction
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import Waypoint, WaypointType
from tripboard.presenters.events import WaypointsChanged
from tripboard.presenters.gate import UiGate
from tripboard.presenters.list_presenter import (
    EMPTY_LIST_MESSAGES,
    LOAD_TIMEOUT_MESSAGE,
    ListPresenter,
)
from tripboard.presenters.pipeline import derive_display_list
from tripboard.store.backend import BackendError, InMemoryTripBackend
from tripboard.store.filter_store import FilterStore
from tripboard.store.waypoints_store import LoadPolicy, WaypointsStore

DESTINATIONS = [Destination(id="ams", name="Amsterdam"), Destination(id="gva", name="Geneva")]
OFFERS = [OfferGroup(type="flight")]


def _waypoint(
    waypoint_id: str,
    day: int,
    *,
    price: int = 100,
    hours: int = 1,
) -> Waypoint:
    start = datetime(2030, 1, day, 10, 0, tzinfo=UTC)
    return Waypoint(
        id=waypoint_id,
        type=WaypointType.FLIGHT,
        base_price=price,
        date_from=start,
        date_to=start + timedelta(hours=hours),
        destination="ams",
    )


class _FakeWaypointView:
    def __init__(self, log: list[tuple[Any, ...]]) -> None:
        self._log = log
        self.shown: list[Waypoint] = []
        self.states: list[VisualState] = []
        self.removed = 0
        self.editor_open = False

    def show_waypoint(self, waypoint: Waypoint, destinations: Any, offers: Any) -> None:
        del destinations, offers
        self.shown.append(waypoint)

    def open_editor(self) -> None:
        self.editor_open = True

    def close_editor(self) -> None:
        self.editor_open = False

    def show_state(self, state: VisualState) -> None:
        self.states.append(state)
        self._log.append(("state", self.shown[-1].id, state))

    def remove(self) -> None:
        self.removed += 1


class _FakeNewWaypointView:
    def __init__(self) -> None:
        self.drafts: list[Waypoint] = []
        self.states: list[VisualState] = []
        self.removed = 0

    def show_draft(self, draft: Waypoint, destinations: Any, offers: Any) -> None:
        del destinations, offers
        self.drafts.append(draft)

    def show_state(self, state: VisualState) -> None:
        self.states.append(state)

    def remove(self) -> None:
        self.removed += 1


class _FakeBoardView:
    def __init__(self) -> None:
        self.log: list[tuple[Any, ...]] = []
        self.calls: list[tuple[Any, ...]] = []
        self.waypoint_views: list[_FakeWaypointView] = []
        self.new_views: list[_FakeNewWaypointView] = []
        self.blocked_history: list[bool] = []

    def show_loading(self) -> None:
        self.calls.append(("loading",))

    def show_error(self, message: str) -> None:
        self.calls.append(("error", message))

    def show_board(self, *, sort_type: SortType, empty_message: str | None) -> None:
        self.calls.append(("board", sort_type, empty_message))

    def clear_board(self) -> None:
        self.calls.append(("clear",))

    def set_blocked(self, blocked: bool) -> None:
        self.blocked_history.append(blocked)
        self.log.append(("blocked", blocked))

    def mount_waypoint(self, presenter: Any) -> _FakeWaypointView:
        del presenter
        view = _FakeWaypointView(self.log)
        self.waypoint_views.append(view)
        return view

    def mount_new_waypoint(self, presenter: Any) -> _FakeNewWaypointView:
        del presenter
        view = _FakeNewWaypointView()
        self.new_views.append(view)
        return view

    @property
    def live_views(self) -> list[_FakeWaypointView]:
        return [view for view in self.waypoint_views if view.removed == 0]

    @property
    def displayed_ids(self) -> list[str]:
        return [view.shown[-1].id for view in self.live_views]


class _ControlledBackend(InMemoryTripBackend):
    """Backend whose mutations can be held back or rejected."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.hold: asyncio.Event | None = None
        self.reject: set[str] = set()
        self.fail_loads = 0

    async def _gatekeep(self, operation: str) -> None:
        if self.hold is not None:
            await self.hold.wait()
        if operation in self.reject:
            raise BackendError(f"{operation} rejected")

    async def get_waypoints(self) -> list[Waypoint]:
        if self.fail_loads > 0:
            self.fail_loads -= 1
            raise BackendError("boom")
        return await super().get_waypoints()

    async def add_waypoint(self, waypoint: Waypoint) -> Waypoint:
        await self._gatekeep("add")
        return await super().add_waypoint(waypoint)

    async def update_waypoint(self, waypoint: Waypoint) -> Waypoint:
        await self._gatekeep("update")
        return await super().update_waypoint(waypoint)

    async def delete_waypoint(self, waypoint_id: str) -> None:
        await self._gatekeep("delete")
        await super().delete_waypoint(waypoint_id)


@dataclass
class _Board:
    presenter: ListPresenter
    store: WaypointsStore
    filters: FilterStore
    view: _FakeBoardView
    backend: _ControlledBackend
    gate: UiGate
    destroyed: list[bool] = field(default_factory=list)


def _make_board(
    waypoints: list[Waypoint],
    *,
    lower: float = 0.0,
    upper: float = 5.0,
    load_timeout: float | None = None,
    max_attempts: int = 1,
) -> _Board:
    backend = _ControlledBackend(
        waypoints=waypoints, destinations=DESTINATIONS, offers=OFFERS
    )
    store = WaypointsStore(
        backend, LoadPolicy(max_attempts=max_attempts, initial_delay_seconds=0.0)
    )
    filters = FilterStore()
    view = _FakeBoardView()
    gate = UiGate(lower_limit=lower, upper_limit=upper, on_change=view.set_blocked)
    destroyed: list[bool] = []
    presenter = ListPresenter(
        view=view,
        waypoints_store=store,
        filter_store=filters,
        gate=gate,
        on_new_waypoint_destroy=lambda: destroyed.append(True),
        load_timeout=load_timeout,
    )
    return _Board(presenter, store, filters, view, backend, gate, destroyed)


async def _loaded_board(waypoints: list[Waypoint], **kwargs: Any) -> _Board:
    board = _make_board(waypoints, **kwargs)
    board.presenter.initialize()
    await board.store.init()
    return board


def _run(scenario: Coroutine[Any, Any, None]) -> None:
    asyncio.run(scenario)


class TestInitialRender:
    def test_loading_view_until_init(self) -> None:
        async def scenario() -> None:
            board = _make_board([_waypoint("a", 1)])
            board.presenter.initialize()
            assert board.view.calls == [("loading",)]
            assert board.presenter.is_loading

            await board.store.init()

            assert not board.presenter.is_loading
            assert board.view.calls[-1] == ("board", SortType.DAY, None)
            assert board.view.displayed_ids == ["a"]

        _run(scenario())

    def test_default_sort_orders_by_day(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board(
                [_waypoint("day1", 1), _waypoint("day3", 3), _waypoint("day2", 2)]
            )
            assert board.view.displayed_ids == ["day1", "day2", "day3"]

        _run(scenario())

    def test_sort_by_price_keeps_ties_in_collection_order(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board(
                [
                    _waypoint("day1", 1, price=50),
                    _waypoint("day3", 3, price=20),
                    _waypoint("day2", 2, price=20),
                ]
            )
            board.presenter.handle_sort_type_change(SortType.PRICE)
            assert board.view.displayed_ids == ["day1", "day3", "day2"]

        _run(scenario())

    def test_empty_list_message_follows_filter(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([])
            assert board.view.calls[-1] == (
                "board",
                SortType.DAY,
                EMPTY_LIST_MESSAGES[FilterType.EVERYTHING],
            )
            board.filters.set_filter(UpdateType.MAJOR, FilterType.PAST)
            assert board.view.calls[-1] == (
                "board",
                SortType.DAY,
                "There are no past events now",
            )

        _run(scenario())

    def test_load_failure_renders_error(self) -> None:
        async def scenario() -> None:
            board = _make_board([_waypoint("a", 1)], max_attempts=2)
            board.backend.fail_loads = 2
            board.presenter.initialize()
            await board.store.init()

            assert board.view.calls[-1] == ("error", "Failed to load the trip: boom")
            assert board.view.waypoint_views == []

        _run(scenario())

    def test_load_timeout_shows_error_and_late_init_recovers(self) -> None:
        async def scenario() -> None:
            board = _make_board([_waypoint("a", 1)], load_timeout=0.01)
            board.presenter.initialize()
            await asyncio.sleep(0.05)
            assert board.view.calls[-1] == ("error", LOAD_TIMEOUT_MESSAGE)

            await board.store.init()
            assert board.view.calls[-1] == ("board", SortType.DAY, None)
            assert board.view.displayed_ids == ["a"]

        _run(scenario())


class TestUpdateDispatch:
    def test_patch_refreshes_only_the_target(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2), _waypoint("c", 3)])
            views_before = list(board.view.live_views)
            target = board.presenter.waypoint_presenters["b"]
            original = target.waypoint
            assert original is not None

            for flag in (True, False, True):
                await board.presenter.handle_view_action(
                    UserAction.UPDATE_WAYPOINT,
                    UpdateType.PATCH,
                    replace(original, is_favorite=flag),
                )

            assert board.view.live_views == views_before
            assert all(view.removed == 0 for view in views_before)
            by_id = {view.shown[0].id: view for view in views_before}
            assert len(by_id["b"].shown) == 4
            assert by_id["b"].shown[-1].is_favorite is True
            assert len(by_id["a"].shown) == 1
            assert len(by_id["c"].shown) == 1
            assert board.presenter.waypoint_presenters["b"] is target

        _run(scenario())

    def test_minor_rebuilds_everything_and_keeps_sort(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board(
                [_waypoint("a", 1, price=10), _waypoint("b", 2, price=30), _waypoint("c", 3, price=20)]
            )
            board.presenter.handle_sort_type_change(SortType.PRICE)
            views_before = list(board.view.live_views)

            b = board.presenter.waypoint_presenters["b"].waypoint
            assert b is not None
            await board.presenter.handle_view_action(
                UserAction.UPDATE_WAYPOINT, UpdateType.MINOR, replace(b, base_price=5)
            )

            assert all(view.removed == 1 for view in views_before)
            expected = derive_display_list(
                board.store.waypoints, board.filters.filter, SortType.PRICE
            )
            assert board.view.displayed_ids == [w.id for w in expected]
            assert board.view.displayed_ids == ["c", "a", "b"]
            assert board.presenter.sort_type == SortType.PRICE

        _run(scenario())

    def test_major_rebuilds_and_resets_sort(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1, price=10), _waypoint("b", 2, price=30)])
            board.presenter.handle_sort_type_change(SortType.PRICE)
            views_before = list(board.view.live_views)

            board.filters.set_filter(UpdateType.MAJOR, FilterType.FUTURE)

            assert all(view.removed == 1 for view in views_before)
            assert board.presenter.sort_type == SortType.DAY
            assert board.view.displayed_ids == ["a", "b"]

        _run(scenario())

    def test_stale_patch_is_ignored(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)])
            mounted = len(board.view.waypoint_views)

            board.presenter.dispatch(WaypointsChanged(UpdateType.PATCH, _waypoint("ghost", 2)))

            assert len(board.view.waypoint_views) == mounted
            assert board.view.live_views[0].removed == 0

        _run(scenario())

    def test_choosing_current_or_disabled_sort_is_a_noop(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)])
            calls = len(board.view.calls)

            board.presenter.handle_sort_type_change(SortType.DAY)
            board.presenter.handle_sort_type_change(SortType.OFFERS)

            assert len(board.view.calls) == calls
            assert board.view.live_views[0].removed == 0

        _run(scenario())


class TestActionOrchestration:
    def test_rejected_delete_ends_aborting_and_keeps_waypoint(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2)])
            board.backend.reject = {"delete"}
            target = board.presenter.waypoint_presenters["b"]
            assert target.waypoint is not None

            await board.presenter.handle_view_action(
                UserAction.DELETE_WAYPOINT, UpdateType.MINOR, target.waypoint
            )

            assert target.state == VisualState.ABORTING
            view = board.view.live_views[1]
            assert view.states[-2:] == [VisualState.DELETING, VisualState.ABORTING]
            assert board.view.displayed_ids == ["a", "b"]
            assert [w.id for w in board.store.waypoints] == ["a", "b"]
            assert board.gate.is_blocked is False

            target.dismiss_abort()
            assert target.state == VisualState.IDLE

        _run(scenario())

    def test_rejected_update_keeps_previous_data(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1, price=10)])
            board.backend.reject = {"update"}
            original = board.store.waypoints[0]

            await board.presenter.handle_view_action(
                UserAction.UPDATE_WAYPOINT, UpdateType.MINOR, replace(original, base_price=99)
            )

            assert board.store.waypoints[0] == original
            assert board.presenter.waypoint_presenters["a"].state == VisualState.ABORTING
            assert board.view.live_views[0].shown == [original]

        _run(scenario())

    def test_successful_add_closes_form_and_shows_waypoint(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2)])
            board.presenter.handle_sort_type_change(SortType.PRICE)
            board.filters.set_filter(UpdateType.MAJOR, FilterType.PAST)

            board.presenter.create_waypoint()
            creator = board.presenter.new_waypoint_presenter
            assert creator.is_open
            assert board.presenter.sort_type == SortType.DAY
            assert board.filters.filter == FilterType.EVERYTHING

            await creator.submit(_waypoint("", 5))

            assert not creator.is_open
            assert board.destroyed == [True]
            assert board.view.new_views[-1].states == [VisualState.SAVING]
            created = board.store.waypoints[0]
            assert created.id
            assert created.id in board.view.displayed_ids
            assert board.presenter.sort_type == SortType.DAY
            assert board.filters.filter == FilterType.EVERYTHING

        _run(scenario())

    def test_rejected_add_keeps_form_open_in_aborting(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)])
            board.backend.reject = {"add"}
            board.presenter.create_waypoint()
            creator = board.presenter.new_waypoint_presenter

            await creator.submit(_waypoint("", 5))

            assert creator.is_open
            assert creator.state == VisualState.ABORTING
            assert board.view.new_views[-1].states == [VisualState.SAVING, VisualState.ABORTING]
            assert board.destroyed == []
            assert board.view.displayed_ids == ["a"]

        _run(scenario())

    def test_action_on_undisplayed_waypoint_is_dropped(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)])
            await board.presenter.handle_view_action(
                UserAction.DELETE_WAYPOINT, UpdateType.MINOR, _waypoint("ghost", 2)
            )
            assert [w.id for w in board.store.waypoints] == ["a"]
            assert board.gate.is_blocked is False

        _run(scenario())

    def test_opening_an_editor_resets_siblings_and_cancels_creation(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2)])
            board.presenter.create_waypoint()
            first = board.presenter.waypoint_presenters["a"]
            second = board.presenter.waypoint_presenters["b"]
            first_view, second_view = board.view.live_views

            first.open_editor()
            assert not board.presenter.new_waypoint_presenter.is_open
            assert board.destroyed == [True]
            assert first_view.editor_open

            second.open_editor()
            assert not first_view.editor_open
            assert second_view.editor_open
            assert board.destroyed == [True]

        _run(scenario())


class TestGating:
    def test_second_action_waits_for_the_gate(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2)])
            board.backend.hold = asyncio.Event()
            a = board.presenter.waypoint_presenters["a"]
            b = board.presenter.waypoint_presenters["b"]
            assert a.waypoint is not None and b.waypoint is not None

            first = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.UPDATE_WAYPOINT,
                    UpdateType.PATCH,
                    replace(a.waypoint, is_favorite=True),
                )
            )
            await asyncio.sleep(0.01)
            second = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.DELETE_WAYPOINT, UpdateType.MINOR, b.waypoint
                )
            )
            await asyncio.sleep(0.01)

            assert a.state == VisualState.SAVING
            assert b.state == VisualState.IDLE

            board.backend.hold.set()
            await asyncio.gather(first, second)

            first_release = board.view.log.index(("blocked", False))
            deleting = board.view.log.index(("state", "b", VisualState.DELETING))
            assert deleting > first_release
            assert board.view.displayed_ids == ["a"]
            assert board.view.blocked_history == [True, False, True, False]

        _run(scenario())

    def test_late_outcome_after_forced_release_is_applied(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)], upper=0.02)
            board.backend.hold = asyncio.Event()
            a = board.presenter.waypoint_presenters["a"]
            assert a.waypoint is not None

            task = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.UPDATE_WAYPOINT,
                    UpdateType.PATCH,
                    replace(a.waypoint, is_favorite=True),
                )
            )
            await asyncio.sleep(0.06)
            assert board.view.blocked_history == [True, False]
            assert a.state == VisualState.SAVING

            board.backend.hold.set()
            await task

            assert a.state == VisualState.IDLE
            assert a.waypoint is not None and a.waypoint.is_favorite
            assert board.view.blocked_history == [True, False]

        _run(scenario())

    def test_action_on_pending_waypoint_after_forced_release_is_dropped(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)], upper=0.02)
            board.backend.hold = asyncio.Event()
            a = board.presenter.waypoint_presenters["a"]
            assert a.waypoint is not None
            original = a.waypoint

            task = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.UPDATE_WAYPOINT,
                    UpdateType.PATCH,
                    replace(original, is_favorite=True),
                )
            )
            await asyncio.sleep(0.06)
            await board.presenter.handle_view_action(
                UserAction.DELETE_WAYPOINT, UpdateType.MINOR, original
            )
            assert a.state == VisualState.SAVING

            board.backend.hold.set()
            await task
            assert [w.id for w in board.store.waypoints] == ["a"]

        _run(scenario())

    def test_rejection_after_rebuild_leaves_fresh_row_idle(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)], upper=0.02)
            board.backend.hold = asyncio.Event()
            board.backend.reject = {"update"}
            stale = board.presenter.waypoint_presenters["a"]
            assert stale.waypoint is not None

            task = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.UPDATE_WAYPOINT,
                    UpdateType.PATCH,
                    replace(stale.waypoint, is_favorite=True),
                )
            )
            await asyncio.sleep(0.06)
            board.filters.set_filter(UpdateType.MAJOR, FilterType.EVERYTHING)
            fresh = board.presenter.waypoint_presenters["a"]
            assert fresh is not stale

            board.backend.hold.set()
            await task

            assert fresh.state == VisualState.IDLE
            assert board.view.live_views[0].states == [VisualState.IDLE]
            assert board.store.waypoints[0].is_favorite is False

        _run(scenario())

    def test_rejected_delete_after_rebuild_is_dropped(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1), _waypoint("b", 2)], upper=0.02)
            board.backend.hold = asyncio.Event()
            board.backend.reject = {"delete"}
            stale = board.presenter.waypoint_presenters["b"]
            assert stale.waypoint is not None

            task = asyncio.create_task(
                board.presenter.handle_view_action(
                    UserAction.DELETE_WAYPOINT, UpdateType.MINOR, stale.waypoint
                )
            )
            await asyncio.sleep(0.06)
            board.presenter.handle_sort_type_change(SortType.PRICE)

            board.backend.hold.set()
            await task

            assert board.presenter.waypoint_presenters["b"].state == VisualState.IDLE
            assert stale.state == VisualState.DELETING
            assert sorted(board.view.displayed_ids) == ["a", "b"]

        _run(scenario())

    def test_rejected_add_after_form_was_reopened_is_dropped(self) -> None:
        async def scenario() -> None:
            board = await _loaded_board([_waypoint("a", 1)], upper=0.02)
            board.backend.hold = asyncio.Event()
            board.backend.reject = {"add"}
            board.presenter.create_waypoint()
            creator = board.presenter.new_waypoint_presenter

            task = asyncio.create_task(creator.submit(_waypoint("", 5)))
            await asyncio.sleep(0.06)
            creator.cancel()
            board.presenter.create_waypoint()
            assert creator.is_open
            assert creator.state == VisualState.IDLE

            board.backend.hold.set()
            await task

            assert creator.state == VisualState.IDLE
            assert board.view.new_views[-1].states == []
            assert [w.id for w in board.store.waypoints] == ["a"]

        _run(scenario())
