"""Tests for waypoint.dispatch: per-phase ordering, short-circuit, bookkeeping."""

import pytest

from waypoint.dispatch import Dispatcher
from waypoint.http import Request, Response
from waypoint.middleware import Middleware, Phase
from waypoint.routing import Router, RouterRegistry
from waypoint.testing import RecordingMiddleware, recorder

REQ = Request(method="GET", uri="/a")
RES = Response.ok()


def _setup(*middleware) -> tuple[Dispatcher, RouterRegistry]:
    registry = RouterRegistry()
    for mw in middleware:
        registry.add(Router().get("/a", mw))
    return Dispatcher(registry), registry


class TestEntered:
    @pytest.mark.anyio
    async def test_runs_hooks_in_order(self) -> None:
        log: list = []
        dispatcher, registry = _setup(RecordingMiddleware(log, "one"), RecordingMiddleware(log, "two"))
        routes = registry.active_routes("/a", "GET")
        assert await dispatcher.entered(routes, REQ) == 2
        assert log == [("one", "entered", "/a"), ("two", "entered", "/a")]

    @pytest.mark.anyio
    async def test_next_false_stops_pass(self) -> None:
        log: list = []
        dispatcher, registry = _setup(
            RecordingMiddleware(log, "one", proceed=False),
            RecordingMiddleware(log, "two"),
        )
        await dispatcher.entered(registry.active_routes("/a", "GET"), REQ)
        assert log == [("one", "entered", "/a")]

    @pytest.mark.anyio
    async def test_skips_function_middleware_and_hookless_objects(self) -> None:
        log: list = []
        dispatcher, registry = _setup(
            recorder(log, "fn", proceed=False),
            RecordingMiddleware(log, "no-entered", hooks=("updated",), proceed=False),
            RecordingMiddleware(log, "last"),
        )
        await dispatcher.entered(registry.active_routes("/a", "GET"), REQ)
        assert log == [("last", "entered", "/a")]

    @pytest.mark.anyio
    async def test_does_not_mark_visited(self) -> None:
        log: list = []
        dispatcher, registry = _setup(RecordingMiddleware(log, "one"))
        await dispatcher.entered(registry.active_routes("/a", "GET"), REQ)
        assert registry.visited_routes() == []

    @pytest.mark.anyio
    async def test_routes_none_queries_registry(self) -> None:
        log: list = []
        dispatcher, _ = _setup(RecordingMiddleware(log, "one"))
        await dispatcher.dispatch(Phase.ENTERED, None, REQ)
        assert log == [("one", "entered", "/a")]

    @pytest.mark.anyio
    async def test_requires_request(self) -> None:
        dispatcher, _ = _setup()
        with pytest.raises(TypeError, match="needs a request"):
            await dispatcher.dispatch(Phase.ENTERED, [])


class TestUpdated:
    @pytest.mark.anyio
    async def test_marks_reached_routes_visited(self) -> None:
        log: list = []
        dispatcher, registry = _setup(recorder(log, "fn"), RecordingMiddleware(log, "obj"))
        routes = registry.active_routes("/a", "GET")
        await dispatcher.updated(routes, REQ, RES)
        assert [route.visited for route in routes] == [REQ, REQ]
        assert log == [("fn", "call", "/a"), ("obj", "updated", "/a")]

    @pytest.mark.anyio
    async def test_function_without_proceed_halts(self) -> None:
        log: list = []
        dispatcher, registry = _setup(recorder(log, "fn", proceed=False), RecordingMiddleware(log, "obj"))
        routes = registry.active_routes("/a", "GET")
        assert await dispatcher.updated(routes, REQ, RES) == 1
        assert log == [("fn", "call", "/a")]
        assert routes[0].visited == REQ
        assert routes[1].visited is None

    @pytest.mark.anyio
    async def test_hookless_object_does_not_halt(self) -> None:
        log: list = []
        dispatcher, registry = _setup(
            RecordingMiddleware(log, "entered-only", hooks=("entered",), proceed=False),
            recorder(log, "fn"),
        )
        routes = registry.active_routes("/a", "GET")
        await dispatcher.updated(routes, REQ, RES)
        assert log == [("fn", "call", "/a")]
        # Bookkeeping happens even without an updated hook
        assert routes[0].visited == REQ

    @pytest.mark.anyio
    async def test_halt_does_not_affect_a_later_pass(self) -> None:
        log: list = []
        gate = RecordingMiddleware(log, "gate", proceed=False)
        dispatcher, registry = _setup(gate, RecordingMiddleware(log, "after"))
        routes = registry.active_routes("/a", "GET")

        await dispatcher.updated(routes, REQ, RES)
        gate.proceed = True
        await dispatcher.updated(routes, REQ, RES)

        assert log == [
            ("gate", "updated", "/a"),
            ("gate", "updated", "/a"),
            ("after", "updated", "/a"),
        ]

    @pytest.mark.anyio
    async def test_middleware_exception_aborts_pass(self) -> None:
        log: list = []

        class Broken(Middleware):
            def updated(self, request, response) -> None:
                raise ValueError("render failed")

        dispatcher, registry = _setup(Broken(), RecordingMiddleware(log, "after"))
        routes = registry.active_routes("/a", "GET")
        with pytest.raises(ValueError, match="render failed"):
            await dispatcher.updated(routes, REQ, RES)
        assert log == []
        assert routes[1].visited is None


class TestFailed:
    @pytest.mark.anyio
    async def test_does_not_mark_visited(self) -> None:
        log: list = []
        dispatcher, registry = _setup(recorder(log, "fn"), RecordingMiddleware(log, "obj"))
        routes = registry.active_routes("/a", "GET")
        await dispatcher.failed(routes, REQ, Response(status=500, status_text="Error"))
        assert log == [("fn", "call", "/a"), ("obj", "failed", "/a")]
        assert registry.visited_routes() == []

    @pytest.mark.anyio
    async def test_next_false_stops_before_second_failed_hook(self) -> None:
        log: list = []
        dispatcher, registry = _setup(
            RecordingMiddleware(log, "first", proceed=False),
            RecordingMiddleware(log, "second"),
        )
        routes = registry.active_routes("/a", "GET")
        await dispatcher.failed(routes, REQ, Response(status=503, status_text="Unavailable"))
        assert log == [("first", "failed", "/a")]
        assert routes[1].visited is None


class TestExited:
    @pytest.mark.anyio
    async def test_retires_visited_routes_with_their_own_request(self) -> None:
        log: list = []
        registry = RouterRegistry()
        a = registry.add(Router().get("/a", RecordingMiddleware(log, "a")))
        b = registry.add(Router().get("/b", RecordingMiddleware(log, "b")))
        dispatcher = Dispatcher(registry)
        a.routes[0].visited = Request(method="GET", uri="/a")
        b.routes[0].visited = Request(method="GET", uri="/b?x=1")

        assert await dispatcher.exited() == 2
        assert log == [("a", "exited", "/a"), ("b", "exited", "/b?x=1")]
        assert registry.visited_routes() == []

    @pytest.mark.anyio
    async def test_clears_routes_without_exited_hook(self) -> None:
        log: list = []
        dispatcher, registry = _setup(recorder(log, "fn"), RecordingMiddleware(log, "obj", hooks=("updated",)))
        routes = registry.active_routes("/a", "GET")
        await dispatcher.updated(routes, REQ, RES)
        log.clear()

        await dispatcher.exited()
        assert log == []
        assert registry.visited_routes() == []

    @pytest.mark.anyio
    async def test_empty_pass_is_a_no_op(self) -> None:
        dispatcher, _ = _setup(RecordingMiddleware([], "one"))
        assert await dispatcher.exited() == 0

    @pytest.mark.anyio
    async def test_ignores_next(self) -> None:
        log: list = []
        dispatcher, registry = _setup(
            RecordingMiddleware(log, "first", proceed=False),
            RecordingMiddleware(log, "second"),
        )
        for route in registry.active_routes("/a", "GET"):
            route.visited = REQ
        await dispatcher.exited()
        assert log == [("first", "exited", "/a"), ("second", "exited", "/a")]

    @pytest.mark.anyio
    async def test_explicit_routes_restrict_the_pass(self) -> None:
        log: list = []
        registry = RouterRegistry()
        a = registry.add(Router().get("/a", RecordingMiddleware(log, "a")))
        b = registry.add(Router().get("/b", RecordingMiddleware(log, "b")))
        dispatcher = Dispatcher(registry)
        a.routes[0].visited = REQ
        b.routes[0].visited = REQ

        await dispatcher.dispatch(Phase.EXITED, a.routes)
        assert log == [("a", "exited", "/a")]
        assert registry.visited_routes() == [b.routes[0]]

    @pytest.mark.anyio
    async def test_phase_accepts_string(self) -> None:
        dispatcher, registry = _setup(RecordingMiddleware([], "one"))
        registry.active_routes("/a", "GET")[0].visited = REQ
        await dispatcher.dispatch("exited", None)  # type: ignore[arg-type]
        assert registry.visited_routes() == []


class TestPathParams:
    @pytest.mark.anyio
    async def test_each_route_sees_its_own_params(self) -> None:
        seen: list = []

        class Viewer(Middleware):
            def entered(self, request) -> None:
                seen.append((self.name, dict(request.params)))

            def exited(self, request) -> None:
                seen.append((self.name, "exited", dict(request.params)))

        def render(request, response, proceed) -> None:
            seen.append(("render", dict(request.params)))
            proceed()

        registry = RouterRegistry()
        registry.add(Router().use(Viewer("all")))
        registry.add(Router().get("/users/{id:int}", Viewer("user")))
        registry.add(Router().get("/users/{id:int}", render))
        dispatcher = Dispatcher(registry)
        request = Request(method="GET", uri="/users/7?tab=posts")

        routes = registry.active_routes(request.uri, request.method)
        await dispatcher.entered(routes, request)
        await dispatcher.updated(routes, request, RES)
        await dispatcher.exited()

        assert seen == [
            ("all", {}),
            ("user", {"id": 7}),
            ("render", {"id": 7}),
            ("all", "exited", {}),
            ("user", "exited", {"id": 7}),
        ]
        assert request.params == {}
