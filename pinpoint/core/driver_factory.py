"""
Driver Factory - WebDriver creation for live resolution.

Provides a single interface to create the Chrome WebDriver that the
live snapshotter and action executor run against.
"""

from typing import Optional
from contextlib import contextmanager
from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

# Type alias for driver - can be extended to support other browsers
WebDriverType = webdriver.Chrome


def create_driver(
    headless: bool = False,
    profile_path: Optional[str] = None,
    window_size: str = "1280,900",
    page_load_timeout: int = 30,
) -> WebDriverType:
    """
    Create a Chrome WebDriver instance.

    Args:
        headless: Run browser in headless mode
        profile_path: Path to browser profile for session persistence
        window_size: Window size as "width,height"
        page_load_timeout: Seconds before driver.get() gives up

    Returns:
        WebDriver instance

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com")
    """
    options = ChromeOptions()

    if headless:
        options.add_argument("--headless=new")

    options.add_argument(f"--window-size={window_size}")
    options.add_argument("--disable-gpu")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")

    if profile_path:
        options.add_argument(f"--user-data-dir={profile_path}")

    # Selenium Manager resolves a matching chromedriver
    driver = webdriver.Chrome(options=options)
    driver.set_page_load_timeout(page_load_timeout)
    return driver


@contextmanager
def driver_session(headless: bool = False, profile_path: Optional[str] = None):
    """
    Create a driver and always quit it afterwards.

    Example:
        >>> with driver_session(headless=True) as driver:
        ...     driver.get("https://example.com")
    """
    driver = create_driver(headless=headless, profile_path=profile_path)
    try:
        yield driver
    finally:
        driver.quit()
