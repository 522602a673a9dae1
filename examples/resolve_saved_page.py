#!/usr/bin/env python3
"""
Resolve Saved Page Example
==========================

This example resolves a few locators against static HTML and prints
which strategy answered each one, or why none could.

No browser is needed.

Usage:
    python examples/resolve_saved_page.py
"""

from pinpoint import LocatorResolver, LocatorSpec, snapshot_from_html
from pinpoint.reporters import describe


PAGE = """
<html>
<body>
  <div id="root">
    <form id="login-form">
      <input type="text" class="form-control" placeholder="Username">
      <input type="password" class="form-control" placeholder="Password">
    </form>
    <button id="signup" class="btn btn-primary">Sign up</button>
  </div>
</body>
</html>
"""


def main():
    """Resolve locators against a static page."""

    print("=" * 60)
    print("🎯 Pinpoint - Saved Page Example")
    print("=" * 60)
    print()

    document = snapshot_from_html(PAGE, source="login.html")
    resolver = LocatorResolver()

    locators = [
        # Found by the generic attribute strategy
        'input[placeholder="Username"]',
        # id wins
        "#signup",
        # Two inputs share the class: ambiguous
        "input.form-control",
        # Same locator, disambiguated by index
        LocatorSpec.where("class", "form-control", tag="input", index=1),
        # Nothing has this id
        "#forgot-password",
    ]

    for locator in locators:
        print(f"Locator: {locator}")
        print("-" * 40)
        print(describe(resolver.resolve(locator, document)))
        print()


if __name__ == "__main__":
    main()
