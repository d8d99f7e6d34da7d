"""
Unit tests for the Router facade and dispatch().
"""

import pytest

from httprouter import (
    HTTPError,
    Injector,
    InvalidCallback,
    Router,
    RouterConfig,
    dispatch,
)

from conftest import ProductsController, make_request


QUIET = RouterConfig(access_log=False)


def run(request, setup, **kwargs):
    """Dispatch without access logging."""
    return dispatch(request, setup, config=QUIET, **kwargs)


class TestRouteRegistration:
    """Tests for route() and the verb helpers."""

    def test_first_match_wins(self):
        """Test that routing stops at the first responding route."""
        seen = []

        def setup(router):
            router.get("/a", lambda query: seen.append("first") or "first")
            router.get("/a", lambda query: seen.append("second") or "second")

        response = run(make_request("GET", "/a"), setup)

        assert response.text == "first"
        assert seen == ["first"]

    def test_none_result_continues(self):
        """Test that a handler returning None lets the next route run."""
        def setup(router):
            router.get("/a", lambda query: None)
            router.get("/a", lambda query: {"second": True})

        assert run(make_request("GET", "/a"), setup).json() == {"second": True}

    def test_skipped_route_has_no_side_effects(self):
        """Test that a non-matching registration never touches its target."""
        created = []

        class Tracked:
            def __init__(self):
                created.append(True)

            def show(self, body):
                return "wrong route"

        def setup(router):
            router.post("/products/([0-9]+)", (Tracked, "show"))
            router.controller("/orders", Tracked)
            router.get("/products/([0-9]+)", lambda sku, query: {"sku": sku})

        response = run(make_request("GET", "/products/2", body=b"{broken"), setup)

        assert response.json() == {"sku": "2"}
        assert created == []

    def test_no_match_returns_none(self):
        def setup(router):
            router.get("/a", lambda query: "a")

        assert run(make_request("GET", "/b"), setup) is None

    def test_get_receives_captures_and_query(self):
        def setup(router):
            router.get("/products/([0-9]+)/?", lambda sku, query: {"sku": sku, **query})

        response = run(make_request("GET", "/products/7/", query={"page": "2"}), setup)
        assert response.json() == {"sku": "7", "page": "2"}

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_body_methods_receive_body(self, method):
        def setup(router):
            register = getattr(router, method.lower())
            register("/items/([0-9]+)", lambda item_id, body: {"id": item_id, "body": body})

        response = run(make_request(method, "/items/3", body=b'{"a": 1}'), setup)
        assert response.json() == {"id": "3", "body": {"a": 1}}

    def test_delete_receives_query(self):
        def setup(router):
            router.delete("/items/([0-9]+)", lambda item_id, query: {"deleted": item_id})

        assert run(make_request("DELETE", "/items/5"), setup).json() == {"deleted": "5"}

    def test_route_with_extra_args(self):
        """Test that route() appends its extra arguments after the captures."""
        def setup(router):
            router.route("(GET|HEAD) /echo/(.*)", lambda verb, rest, tag: [verb, rest, tag], "x")

        assert run(make_request("HEAD", "/echo/a/b"), setup).json() == ["HEAD", "a/b", "x"]

    def test_body_not_parsed_for_unmatched_route(self):
        """Test that a broken body only matters to the route that matches."""
        def setup(router):
            router.post("/other", lambda body: "other")
            router.get("/ok", lambda query: "ok")

        assert run(make_request("GET", "/ok", body=b"{broken"), setup).text == "ok"

    def test_invalid_json_body_is_400(self):
        def setup(router):
            router.post("/items", lambda body: body)

        response = run(make_request("POST", "/items", body=b'{"a":'), setup)
        assert response.status == 400

    def test_non_callable_fails_eagerly(self):
        """Test that verb helpers reject non-callables even without a match."""
        def setup(router):
            router.get("/never", "not callable")

        response = run(make_request("GET", "/other"), setup)

        assert response.status == 500
        assert "Invalid callback" in response.text


class TestCallbackTargets:
    """Tests for (class, method) pair targets."""

    def test_class_pair_created_lazily(self):
        created = []

        class Handler:
            def __init__(self):
                created.append(True)

            def show(self, query):
                return "shown"

        def setup(router):
            router.get("/skip", (Handler, "show"))
            router.get("/show", (Handler, "show"))

        assert run(make_request("GET", "/show"), setup).text == "shown"
        assert len(created) == 1

    def test_instance_pair(self, products):
        def setup(router):
            router.get("/list", (products, "index"))

        assert len(run(make_request("GET", "/list"), setup).json()) == 3

    def test_registered_identifier(self):
        injector = Injector().register("products", ProductsController, args=("Outlet",))

        def setup(router):
            router.get("/shop", ("products", "index"))

        response = run(make_request("GET", "/shop"), setup, injector=injector)
        assert response.status == 200

    def test_missing_method_is_invalid_callback(self):
        def setup(router):
            router.get("/x", (ProductsController, "missing"))

        response = run(make_request("GET", "/x"), setup)

        assert response.status == 500
        assert response.text.endswith("Invalid callback")

    def test_invalid_callback_message(self):
        assert InvalidCallback("nope").message == "'nope': Invalid callback"


class TestErrorBoundary:
    """Tests for errors raised by handlers."""

    def test_http_error_becomes_response(self):
        def gone(query):
            raise HTTPError("Gone", 410)

        def setup(router):
            router.get("/x", gone)

        response = run(make_request("GET", "/x"), setup)

        assert response.status == 410
        assert response.text == "Gone"

    def test_object_result_is_json(self):
        """Test that a plain object is answered with its public attributes."""
        class Thing:
            def __init__(self):
                self.name = "lamp"

        def setup(router):
            router.get("/thing", lambda query: Thing())

        response = run(make_request("GET", "/thing"), setup)

        assert response.status == 200
        assert response.json() == {"name": "lamp"}

    def test_set_result_is_json(self):
        def setup(router):
            router.get("/tags", lambda query: {"a", "b"})

        assert sorted(run(make_request("GET", "/tags"), setup).json()) == ["a", "b"]

    def test_unencodable_result_is_500(self):
        """Test that an encoding failure stays inside the route boundary."""
        def setup(router):
            router.get("/x", lambda query: {"when": object()})
            router.get("/x", lambda query: "never")

        response = run(make_request("GET", "/x"), setup)

        assert response.status == 500
        assert "not JSON serializable" in response.text

    def test_invalid_signature_is_500(self):
        """Test that a signature that is not a valid regex becomes a response."""
        def setup(router):
            router.route("GET /a/([0-9]+", lambda n: n)
            router.get("/a/1", lambda query: "never")

        response = run(make_request("GET", "/a/1"), setup)

        assert response.status == 500
        assert response.text == "'GET /a/([0-9]+': Invalid route signature"

    def test_unexpected_error_is_500(self):
        def boom(query):
            raise ValueError("boom")

        def setup(router):
            router.get("/x", boom)
            router.get("/x", lambda query: "never")

        response = run(make_request("GET", "/x"), setup)

        assert response.status == 500
        assert response.text == "boom"

    def test_handler_cannot_swallow_response(self):
        """Test that except Exception does not catch an emitted response."""
        def setup(router):
            def handler(query):
                try:
                    router.respond("sent", 202)
                except Exception:
                    return "swallowed"

            router.get("/x", handler)

        response = run(make_request("GET", "/x"), setup)

        assert response.status == 202
        assert response.text == "sent"


class TestControllers:
    """End-to-end controller dispatch through the router."""

    def setup_shop(self, router):
        router.controller("/products", ProductsController, "Shop")
        router.get("/fallthrough", lambda query: "fallthrough")

    def test_method_prefixed_wins(self):
        response = run(make_request("GET", "/products/sale"), self.setup_shop)
        assert response.json() == [{"price": 10, "name": "Lamp"}]

    def test_bare_name(self):
        response = run(make_request("VIEW", "/products/sale"), self.setup_shop)
        assert response.json() == [{"price": 90}]

    def test_index(self):
        for path in ("/products", "/products/"):
            response = run(make_request("GET", path), self.setup_shop)
            assert len(response.json()) == 3

    def test_route_not_found(self):
        response = run(make_request("DELETE", "/products/1"), self.setup_shop)

        assert response.status == 404
        assert response.text == "ProductsController.delete: Route not found"

    def test_post_body_and_query(self):
        received = {}

        class Recorder:
            def post(self, *args):
                received["args"] = args
                return "ok"

        def setup(router):
            router.controller("/orders", Recorder)

        run(make_request("POST", "/orders", query={"q": "1"}, body=b'{"sku":10}'), setup)
        assert received["args"] == ({"sku": 10}, {"q": "1"})

    def test_hook_forbids_and_stops_routing(self):
        """Test that a hook response prevents the handler and later routes."""
        later = []

        def setup(router):
            router.controller("/products", ProductsController, "Shop", False)
            router.post("/products", lambda body: later.append(body) or "later")

        response = run(make_request("POST", "/products", body=b'{"sku": 9}'), setup)

        assert response.status == 403
        assert response.text == "Forbidden"
        assert later == []

    def test_hook_respond_directly(self):
        class Guarded:
            def __init__(self, router):
                self.router = router

            def before(self):
                self.router.respond({"error": "login required"}, 401)

            def index(self, query):
                return "secret"

        def setup(router):
            router.controller("/admin", Guarded, router)

        response = run(make_request("GET", "/admin"), setup)

        assert response.status == 401
        assert response.json() == {"error": "login required"}

    def test_unmatched_prefix_continues(self):
        response = run(make_request("GET", "/fallthrough"), self.setup_shop)
        assert response.text == "fallthrough"


class TestRedirectsAndUrls:
    """Tests for Router.redirect and Router.url."""

    def test_redirect(self):
        def setup(router):
            router.get("/old", lambda query: router.redirect("/new"))

        response = run(make_request("GET", "/old", script_url="/old"), setup)

        assert response.status == 307
        assert response.headers["Location"] == "/new"

    def test_redirect_status_from_config(self):
        def setup(router):
            router.get("/old", lambda query: router.redirect("/new"))

        config = RouterConfig(access_log=False, redirect_status=302)
        response = dispatch(make_request("GET", "/old"), setup, config=config)
        assert response.status == 302

    def test_url_idempotent(self):
        request = make_request("GET", "/x", headers={"host": "example.com"}, script_url="/x")
        router = Router(request, config=QUIET)

        assert router.url() == router.url() == "http://example.com/x"


class TestAccessLog:
    """Tests for the access log written by dispatch()."""

    def test_entry_logged(self, caplog):
        def setup(router):
            router.get("/a", lambda query: "a")

        with caplog.at_level("INFO", logger="httprouter.access"):
            dispatch(make_request("GET", "/a"), setup)

        assert any('"GET /a" 200' in record.getMessage() for record in caplog.records)

    def test_json_format(self, caplog):
        config = RouterConfig(log_format="json")

        with caplog.at_level("INFO", logger="httprouter.access"):
            dispatch(make_request("GET", "/none"), lambda router: None, config=config)

        messages = [r.getMessage() for r in caplog.records if r.name == "httprouter.access"]
        assert '"status_code": null' in messages[-1]

    def test_disabled(self, caplog):
        with caplog.at_level("INFO", logger="httprouter.access"):
            run(make_request("GET", "/a"), lambda router: None)

        assert not [r for r in caplog.records if r.name == "httprouter.access"]
