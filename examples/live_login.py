#!/usr/bin/env python3
"""
Live Login Example
==================

This example drives a real Chrome window: it fills in a login form and
clicks the sign-up button, each element found through the strategy chain.

Usage:
    python examples/live_login.py
"""

from urllib.parse import quote

from pinpoint.core.driver_factory import driver_session
from pinpoint.layers.action import ActionExecutor


PAGE = """
<html>
<body>
  <form id="login-form">
    <input type="text" class="form-control" placeholder="Username">
    <input type="password" class="form-control" placeholder="Password">
  </form>
  <button id="signup" class="btn btn-primary" onclick="this.textContent = 'Welcome!'">Sign up</button>
</body>
</html>
"""


def main():
    """Fill the form and click through a live browser."""

    print("=" * 60)
    print("🎯 Pinpoint - Live Login Example")
    print("=" * 60)
    print()

    url = "data:text/html;charset=utf-8," + quote(PAGE)

    with driver_session(headless=False) as driver:
        executor = ActionExecutor(driver)
        executor.navigate(url)

        steps = [
            lambda: executor.type_text('input[placeholder="Username"]', "alice"),
            lambda: executor.type_text("input.form-control >> nth=1", "s3cret"),
            lambda: executor.click("#signup"),
        ]

        for step in steps:
            result = step()
            if result.success:
                print(f"✅ {result.action} {result.target}")
                print(f"   via {result.strategy} at {result.selector} ({result.duration_ms:.0f}ms)")
            else:
                print(f"❌ {result.action} {result.target}")
                print(f"   Error: {result.error}")
                break

        print()
        print("Closing browser...")

    print("Done!")


if __name__ == "__main__":
    main()
