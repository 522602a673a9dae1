"""
Action Executor - Resolve, then act.

Snapshots the live page, resolves a locator through the strategy chain and
performs the action on the matching WebElement. The engine never retries;
this executor is the caller, so it re-snapshots when the page changed
underneath a resolution.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union, TYPE_CHECKING
import logging
import time

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait

from pinpoint.core.exceptions import DetachedNodeError, PinpointError, ResolutionError
from pinpoint.core.locator import LocatorSpec, parse_locator
from pinpoint.layers.intelligence.outcome import ResolutionSuccess
from pinpoint.layers.intelligence.resolver import LocatorResolver
from pinpoint.layers.sense.live_snapshot import LiveSnapshotter

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Result of an action execution."""
    success: bool
    action: str
    target: str
    duration_ms: float
    error: Optional[str] = None
    strategy: Optional[str] = None  # Locator strategy that found the element
    selector: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ActionExecutor:
    """
    Execute actions on elements found by the locator resolver.

    Example:
        >>> executor = ActionExecutor(driver)
        >>> executor.type_text('input[placeholder="Username"]', "alice")
        >>> result = executor.click("#signup")
        >>> if result.success:
        ...     print(f"Clicked via {result.strategy}")
    """

    # Default retry configuration
    MAX_RETRIES = 3
    RETRY_DELAY_MS = 300

    def __init__(
        self,
        driver: "WebDriver",
        resolver: Optional[LocatorResolver] = None,
        snapshotter: Optional[LiveSnapshotter] = None,
        timeout: int = 10,
        max_retries: int = MAX_RETRIES,
    ):
        """
        Initialize the action executor.

        Args:
            driver: Selenium WebDriver
            resolver: Locator resolver (default configuration if None)
            snapshotter: Live snapshot source (built from driver if None)
            timeout: Seconds to wait for the page to settle
            max_retries: Attempts when the page changes mid-resolution
        """
        self.driver = driver
        self.resolver = resolver or LocatorResolver()
        self.snapshotter = snapshotter or LiveSnapshotter(driver)
        self.timeout = timeout
        self.max_retries = max(1, max_retries)

    def locate(self, locator: Union[LocatorSpec, str]) -> Tuple[ResolutionSuccess, "WebElement"]:
        """
        Resolve a locator on the live page and fetch its WebElement.

        Raises:
            ResolutionError: NoMatch or AmbiguousMatch
            DetachedNodeError: the page kept changing for every attempt
        """
        spec = parse_locator(locator) if isinstance(locator, str) else locator
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            if attempt > 0:
                logger.warning(f"[ActionExecutor] Page changed while resolving {spec}, re-snapshotting ({attempt + 1}/{self.max_retries})")
                time.sleep(self.RETRY_DELAY_MS / 1000)
            try:
                document = self.snapshotter.capture()
                outcome = self.resolver.resolve(spec, document)
                if not outcome.success:
                    raise ResolutionError(outcome)
                element = self.driver.find_element(By.CSS_SELECTOR, outcome.node.selector)
                # Catch re-renders between snapshot and find_element
                document.ensure_live(probe=True)
                return outcome, element
            except (DetachedNodeError, StaleElementReferenceException) as e:
                last_error = e

        if isinstance(last_error, DetachedNodeError):
            raise last_error
        raise DetachedNodeError(f"Element for {spec} went stale on every attempt: {last_error}")

    def click(self, locator: Union[LocatorSpec, str], force_js: bool = False) -> ActionResult:
        """
        Click the element a locator resolves to.

        Falls back to a JavaScript click when the native click is
        intercepted or the element is not interactable.
        """
        start_time = time.time()
        target = str(locator)

        try:
            outcome, element = self.locate(locator)
            self._scroll_into_view(element)
            metadata = {}

            if force_js:
                self.driver.execute_script("arguments[0].click();", element)
                metadata["click"] = "js"
            else:
                try:
                    element.click()
                except (ElementClickInterceptedException, ElementNotInteractableException) as e:
                    logger.warning(f"[ActionExecutor] Native click failed on {outcome.node.selector}: {e.__class__.__name__}. Using JS fallback.")
                    self.driver.execute_script("arguments[0].click();", element)
                    metadata["click"] = "js_fallback"

            self._wait_for_stability()
            return self._result(True, "click", target, start_time, outcome=outcome, metadata=metadata)
        except (PinpointError, WebDriverException) as e:
            return self._result(False, "click", target, start_time, error=e)

    def type_text(self, locator: Union[LocatorSpec, str], text: str, clear_first: bool = True) -> ActionResult:
        """Type into the element a locator resolves to."""
        start_time = time.time()
        target = str(locator)

        try:
            outcome, element = self.locate(locator)
            self._scroll_into_view(element)
            metadata = {}
            try:
                if clear_first:
                    element.clear()
                element.send_keys(text)
            except ElementNotInteractableException as e:
                logger.warning(f"[ActionExecutor] send_keys failed on {outcome.node.selector}: {e.__class__.__name__}. Setting value via JS.")
                self.driver.execute_script(
                    "arguments[0].value = arguments[1];"
                    "arguments[0].dispatchEvent(new Event('input', {bubbles: true}));",
                    element,
                    text,
                )
                metadata["type"] = "js_fallback"

            self._wait_for_stability()
            return self._result(True, "type", target, start_time, outcome=outcome, metadata=metadata)
        except (PinpointError, WebDriverException) as e:
            return self._result(False, "type", target, start_time, error=e)

    def navigate(self, url: str) -> bool:
        """Navigate to a URL."""
        try:
            self.driver.get(url)
            self._wait_for_stability()
            return True
        except WebDriverException as e:
            logger.error(f"[ActionExecutor] Navigation to {url} failed: {e.msg or e}")
            return False

    def _result(
        self,
        success: bool,
        action: str,
        target: str,
        start_time: float,
        outcome: Optional[ResolutionSuccess] = None,
        error: Optional[Exception] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActionResult:
        if error is not None:
            logger.error(f"[ActionExecutor] {action} on {target} failed: {error}")
            if isinstance(error, ResolutionError):
                metadata = {"outcome": error.outcome.to_dict()}
        return ActionResult(
            success=success,
            action=action,
            target=target,
            duration_ms=(time.time() - start_time) * 1000,
            error=str(error) if error is not None else None,
            strategy=outcome.strategy if outcome else None,
            selector=outcome.node.selector if outcome else None,
            metadata=metadata or None,
        )

    def _scroll_into_view(self, element: "WebElement") -> None:
        """Scroll an element into the viewport."""
        self.driver.execute_script(
            "arguments[0].scrollIntoView({block: 'center', inline: 'nearest'});",
            element,
        )

    def _wait_for_stability(self) -> None:
        """Wait for document.readyState to reach 'complete'."""
        try:
            WebDriverWait(self.driver, self.timeout).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException:
            logger.debug(f"[ActionExecutor] Page not ready after {self.timeout}s, continuing")
