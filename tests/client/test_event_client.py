from __future__ import annotations

from sentry_log_handler.client import EventClient
from sentry_log_handler.core.builder import EventBuilder


class TagHelper:
    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    def help_building_event(self, builder: EventBuilder) -> None:
        builder.add_extra(self.key, self.value)


def test_send_event_delegates_to_connection(client: EventClient, connection) -> None:
    event = EventBuilder().set_message("hi").build()
    client.send_event(event)
    assert connection.events == [event]


def test_connection_property(client: EventClient, connection) -> None:
    assert client.connection is connection


def test_builder_helpers_run_in_order(client: EventClient) -> None:
    client.add_builder_helper(TagHelper("env", "prod"))
    client.add_builder_helper(TagHelper("env", "staging"))

    builder = EventBuilder()
    client.run_builder_helpers(builder)

    assert builder.build().extra == {"env": "staging"}


def test_remove_builder_helper(client: EventClient) -> None:
    helper = TagHelper("env", "prod")
    client.add_builder_helper(helper)
    client.remove_builder_helper(helper)

    builder = EventBuilder()
    client.run_builder_helpers(builder)

    assert builder.build().extra == {}


def test_close_connection(client: EventClient, connection) -> None:
    client.close_connection()
    assert connection.closed == 1
