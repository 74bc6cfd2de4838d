"""Inbox: a mail client shell driven by waypoint.

Shows middleware in three roles:

- ``Spinner`` is a hook object registered with ``use``: it fires for
  every request on every path and never stops the chain.
- ``render_inbox`` and ``render_message`` are plain functions bound to
  one verb and uri; they draw a successful response into ``screen`` and
  leave failures to ``Spinner``. ``render_message`` reads the message id
  from ``request.params``.
- ``Unsaved`` guards the compose page and cleans up when it is left.

Run against a real API by pointing ``AppConfig.base_url`` at it;
``test_app.py`` swaps in a ``FakeTransport``.
"""

from waypoint import App, AppConfig, Middleware

app = App(AppConfig(base_url="https://mail.example.com"))

screen: dict[str, object] = {"spinner": False, "view": None, "draft": None}


class Spinner(Middleware):
    def entered(self, request) -> None:
        screen["spinner"] = True

    def updated(self, request, response) -> None:
        screen["spinner"] = False

    def failed(self, request, response) -> None:
        screen["spinner"] = False
        screen["view"] = f"error {response.status}"


class Unsaved(Middleware):
    """Keeps a draft alive while the compose page is active."""

    def updated(self, request, response) -> None:
        screen["draft"] = ""

    def exited(self, request) -> None:
        screen["draft"] = None


def render_inbox(request, response, proceed) -> None:
    if not response.is_success:
        return
    screen["view"] = ("inbox", response.payload)


def render_message(request, response, proceed) -> None:
    if not response.is_success:
        return
    screen["view"] = ("message", request.params["id"], response.payload)


app.use(Spinner("spinner"))
app.get("/inbox", render_inbox)
app.get("/api/messages/{id:int}", render_message)
app.get("/compose", Unsaved())
