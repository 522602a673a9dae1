"""
Tests for LiveSnapshotter against a mocked WebDriver.
"""

import logging
from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import WebDriverException

from pinpoint import resolve
from pinpoint.core.exceptions import DetachedNodeError, SnapshotError
from pinpoint.core.locator import parse_locator
from pinpoint.layers.sense.live_snapshot import LiveSnapshotter


PAGE_TREE = {
    "tag": "HTML",
    "attributes": {},
    "text": "",
    "children": [{
        "tag": "body",
        "attributes": {},
        "text": "",
        "children": [
            {"tag": "input", "attributes": {"ID": "email", "type": "email"}, "text": "", "children": []},
            {"tag": "button", "attributes": {"data-testid": "send"}, "text": "Send", "children": []},
        ],
    }],
}


def make_driver(page_state, tree=PAGE_TREE, truncated=False):
    """Driver whose probe answers from page_state['unchanged']."""
    driver = MagicMock()
    driver.current_url = "https://example.test/contact"

    def execute_script(script, *args):
        if "return !!s" in script:
            return page_state["unchanged"]
        return {"tree": tree, "truncated": truncated, "count": 4}

    driver.execute_script.side_effect = execute_script
    return driver


def test_capture_builds_document():
    driver = make_driver({"unchanged": True})
    document = LiveSnapshotter(driver).capture()

    assert document.root.tag == "html"
    assert document.source == "https://example.test/contact"
    assert len(document) == 4
    email = document.root.children[0].children[0]
    assert email.get_attribute("id") == "email"
    assert email.selector == "input#email"


def test_capture_passes_token_and_limit():
    driver = make_driver({"unchanged": True})
    LiveSnapshotter(driver, max_nodes=50).capture()

    script, token, max_nodes = driver.execute_script.call_args[0]
    assert "MutationObserver" in script
    assert len(token) == 32
    assert max_nodes == 50


def test_resolves_against_live_snapshot():
    driver = make_driver({"unchanged": True})
    outcome = resolve(parse_locator("[data-testid=send]"), LiveSnapshotter(driver).capture())

    assert outcome.strategy == "test_attribute"
    assert outcome.node.text_content == "Send"


def test_page_mutation_makes_snapshot_stale():
    state = {"unchanged": True}
    document = LiveSnapshotter(make_driver(state)).capture()

    state["unchanged"] = False
    with pytest.raises(DetachedNodeError, match="example.test"):
        resolve(parse_locator("#email"), document)
    assert document.is_stale


def test_probe_error_treated_as_stale():
    driver = make_driver({"unchanged": True})
    document = LiveSnapshotter(driver).capture()

    driver.execute_script.side_effect = WebDriverException("target window already closed")
    with pytest.raises(DetachedNodeError):
        document.ensure_live(probe=True)


def test_script_failure_raises_snapshot_error():
    driver = MagicMock()
    driver.execute_script.side_effect = WebDriverException("javascript error")

    with pytest.raises(SnapshotError, match="javascript error"):
        LiveSnapshotter(driver).capture()


@pytest.mark.parametrize("returned", [None, [], PAGE_TREE, {"tree": {"attributes": {}}}])
def test_unusable_script_result(returned):
    driver = MagicMock()
    driver.execute_script.return_value = returned

    with pytest.raises(SnapshotError):
        LiveSnapshotter(driver).capture()


def test_one_probe_per_resolution():
    driver = make_driver({"unchanged": True})
    document = LiveSnapshotter(driver).capture()
    driver.execute_script.reset_mock()

    resolve(parse_locator("input[type=email]"), document)

    assert driver.execute_script.call_count == 1


def test_long_values_kept_whole():
    href = "https://example.test/" + "x" * 600
    tree = {
        "tag": "html", "attributes": {}, "text": "", "children": [
            {"tag": "a", "attributes": {"href": href}, "text": "y" * 600, "children": []},
        ],
    }
    driver = make_driver({"unchanged": True}, tree=tree)
    snapshotter = LiveSnapshotter(driver)
    document = snapshotter.capture()

    outcome = resolve(parse_locator(f'a[href="{href}"]'), document)
    assert outcome.success
    assert outcome.node.text == "y" * 600
    assert "substring" not in snapshotter._get_snapshot_script()


class TestTruncation:
    def test_recorded_and_logged(self, caplog):
        driver = make_driver({"unchanged": True}, truncated=True)

        with caplog.at_level(logging.WARNING, logger="pinpoint"):
            document = LiveSnapshotter(driver, max_nodes=4).capture()

        assert document.truncated
        assert "truncated" in caplog.text
        # Ids past the cap may repeat, so selectors run from the root
        email = document.root.children[0].children[0]
        assert email.selector == "html > body > input"

    def test_resolving_truncated_snapshot_warns(self, caplog):
        document = LiveSnapshotter(make_driver({"unchanged": True}, truncated=True)).capture()

        with caplog.at_level(logging.WARNING, logger="pinpoint"):
            outcome = resolve(parse_locator("#email"), document)

        assert outcome.success
        assert "may not be unique" in caplog.text

    def test_strict_mode_raises(self):
        driver = make_driver({"unchanged": True}, truncated=True)
        with pytest.raises(SnapshotError, match="more than 4 elements"):
            LiveSnapshotter(driver, max_nodes=4, strict=True).capture()

    def test_complete_snapshot_not_truncated(self):
        document = LiveSnapshotter(make_driver({"unchanged": True})).capture()
        assert not document.truncated
