"""
Tests for ActionExecutor with mocked WebDriver and snapshotter.
"""

from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    StaleElementReferenceException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from pinpoint.core.exceptions import DetachedNodeError, ResolutionError
from pinpoint.layers.action.executor import ActionExecutor
from pinpoint.layers.sense.html_snapshot import snapshot_from_html


@pytest.fixture
def driver():
    return MagicMock()


@pytest.fixture
def element():
    return MagicMock()


@pytest.fixture
def executor(driver, element, login_html):
    driver.find_element.return_value = element
    snapshotter = MagicMock()
    snapshotter.capture.side_effect = lambda: snapshot_from_html(login_html, source="live")
    executor = ActionExecutor(driver, snapshotter=snapshotter)
    executor.RETRY_DELAY_MS = 0
    with patch.object(ActionExecutor, "_wait_for_stability"):
        yield executor


class TestLocate:
    def test_finds_element_by_resolved_selector(self, executor, driver, element):
        outcome, found = executor.locate("#signup")

        assert found is element
        assert outcome.strategy == "id"
        driver.find_element.assert_called_once_with(By.CSS_SELECTOR, "button#signup")

    def test_ambiguous_raises(self, executor, driver):
        with pytest.raises(ResolutionError) as exc_info:
            executor.locate("input.form-control")

        assert exc_info.value.outcome.kind == "ambiguous"
        driver.find_element.assert_not_called()

    def test_retries_after_stale_snapshot(self, executor, login_html):
        stale = snapshot_from_html(login_html)
        stale.invalidate()
        fresh = snapshot_from_html(login_html)
        executor.snapshotter.capture.side_effect = [stale, fresh]

        outcome, _ = executor.locate("#signup")

        assert outcome.node.document is fresh
        assert executor.snapshotter.capture.call_count == 2

    def test_retries_after_stale_element(self, executor, driver, element):
        driver.find_element.side_effect = [StaleElementReferenceException("gone"), element]

        _, found = executor.locate("#signup")

        assert found is element
        assert driver.find_element.call_count == 2

    def test_gives_up_when_always_stale(self, executor, driver):
        driver.find_element.side_effect = StaleElementReferenceException("gone")

        with pytest.raises(DetachedNodeError, match="went stale"):
            executor.locate("#signup")
        assert driver.find_element.call_count == executor.max_retries

    def test_rerender_after_find_element(self, executor, driver, element, login_html):
        documents = []

        def capture():
            document = snapshot_from_html(login_html)
            # The page re-renders right after the first snapshot
            if not documents:
                document._probe = lambda: False
            documents.append(document)
            return document

        executor.snapshotter.capture.side_effect = capture
        outcome, _ = executor.locate("#signup")

        assert len(documents) == 2
        assert outcome.node.document is documents[1]


class TestClick:
    def test_click_success(self, executor, element):
        result = executor.click('input[placeholder="Password"]')

        assert result.success
        assert result.action == "click"
        assert result.strategy == "attribute"
        assert result.selector == "form#login-form > input:nth-of-type(2)"
        assert result.metadata is None
        element.click.assert_called_once()

    def test_js_fallback_when_intercepted(self, executor, driver, element):
        element.click.side_effect = ElementClickInterceptedException("overlay")

        result = executor.click("#signup")

        assert result.success
        assert result.metadata == {"click": "js_fallback"}
        driver.execute_script.assert_called_with("arguments[0].click();", element)

    def test_force_js(self, executor, element):
        result = executor.click("#signup", force_js=True)

        assert result.metadata == {"click": "js"}
        element.click.assert_not_called()

    def test_no_match_reported(self, executor, element):
        result = executor.click("#does-not-exist")

        assert not result.success
        assert result.error.startswith("No match")
        assert result.metadata["outcome"]["outcome"] == "no_match"
        element.click.assert_not_called()

    def test_invalid_locator_reported(self, executor):
        result = executor.click("button")

        assert not result.success
        assert result.strategy is None

    def test_webdriver_error_reported(self, executor, element):
        element.click.side_effect = WebDriverException("session deleted")

        result = executor.click("#signup")

        assert not result.success
        assert "session deleted" in result.error


class TestTypeText:
    def test_types_after_clear(self, executor, element):
        result = executor.type_text('input[placeholder="Username"]', "alice")

        assert result.success
        element.clear.assert_called_once()
        element.send_keys.assert_called_once_with("alice")

    def test_without_clear(self, executor, element):
        executor.type_text('input[placeholder="Username"]', "alice", clear_first=False)
        element.clear.assert_not_called()

    def test_js_fallback(self, executor, driver, element):
        element.send_keys.side_effect = ElementNotInteractableException("hidden")

        result = executor.type_text('input[placeholder="Username"]', "alice")

        assert result.success
        assert result.metadata == {"type": "js_fallback"}
        script, target, text = driver.execute_script.call_args[0]
        assert "arguments[0].value" in script
        assert target is element
        assert text == "alice"


def test_navigate(executor, driver):
    assert executor.navigate("https://example.test")
    driver.get.assert_called_once_with("https://example.test")

    driver.get.side_effect = WebDriverException("dns")
    assert not executor.navigate("https://broken.test")
