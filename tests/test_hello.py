from datetime import datetime

from modules.hello import HelloModule
from modules.server_info import SERVER_INFO_TEXT, WELCOME_TEXT, ServerInfoModule


def test_hello_message():
    assert HelloModule().hello("World") == "Hello, World! Welcome to the MCP Hello World server!"


def test_current_time_uses_clock_and_locale_format():
    moment = datetime(2026, 10, 18, 15, 4, 5)
    module = HelloModule(clock=lambda: moment)
    assert module.current_time() == f"Current time: {moment.strftime('%c')}"


def test_hello_tools_declared_in_order():
    names = [tool.name for tool in HelloModule().register_tools()]
    assert names == ["hello", "current_time"]


def test_server_info_resources():
    resources = ServerInfoModule().register_resources()
    assert [r.uri for r in resources] == ["info://server", "greeting://welcome"]
    assert all(r.mime_type == "text/plain" for r in resources)
    assert resources[0].read()["text"] == SERVER_INFO_TEXT
    assert resources[1].read()["text"] == WELCOME_TEXT
    assert resources[1].describe()["name"] == "Welcome Message"
