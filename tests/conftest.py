import pytest

from pinpoint.layers.sense.html_snapshot import snapshot_from_html


LOGIN_PAGE = """
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

TWO_FORMS_PAGE = """
<html>
<body>
  <form id="login-form">
    <input name="user" placeholder="Username">
    <button type="submit" data-testid="submit">Log in</button>
  </form>
  <form id="signup-form">
    <input name="email" placeholder="Email">
    <button type="submit" data-testid="submit">Create account</button>
  </form>
  <div class="card"><h3>Basic</h3><button class="buy">Buy</button></div>
  <div class="card"><h3>Pro</h3><button class="buy">Buy</button></div>
  <nav>
    <a href="/help">Need help?</a>
    <a href="/terms">Terms of service</a>
    <a href="/privacy">Privacy</a>
  </nav>
</body>
</html>
"""


@pytest.fixture
def login_page():
    return snapshot_from_html(LOGIN_PAGE, source="login.html")


@pytest.fixture
def two_forms_page():
    return snapshot_from_html(TWO_FORMS_PAGE, source="two_forms.html")


@pytest.fixture
def login_html():
    return LOGIN_PAGE


@pytest.fixture
def two_forms_html():
    return TWO_FORMS_PAGE
