"""
Tests for LocatorResolver.

Covers strategy priority, short-circuiting, ancestor anchoring, index
fallback and the typed failure outcomes.
"""

import pytest

from pinpoint import resolve
from pinpoint.core.config import ResolverConfig
from pinpoint.core.exceptions import DetachedNodeError, ResolutionError
from pinpoint.core.locator import LocatorSpec, parse_locator
from pinpoint.layers.intelligence.outcome import AmbiguousMatch, NoMatch, ResolutionSuccess
from pinpoint.layers.intelligence.resolver import LocatorResolver
from pinpoint.layers.sense.html_snapshot import snapshot_from_html


class TestLoginForm:
    """The login form example: div#root > form#login-form > two inputs."""

    def test_placeholder_resolves_via_generic_attribute(self, login_page):
        spec = LocatorSpec.where("placeholder", "Username", tag="input")
        outcome = LocatorResolver().resolve(spec, login_page)

        assert isinstance(outcome, ResolutionSuccess)
        assert outcome.strategy == "attribute"
        form = login_page.root.children[0].children[0].children[0]
        assert form.get_attribute("id") == "login-form"
        assert outcome.node is form.children[0]
        assert outcome.node.get_attribute("placeholder") == "Username"
        # id, test attribute and name strategies had nothing to work with
        skipped = [a.strategy for a in outcome.attempts if not a.applicable]
        assert skipped == ["builtin", "id", "test_attribute", "name"]

    def test_ambiguous_inputs(self, login_page):
        spec = LocatorSpec.where("class", "form-control", tag="input")
        outcome = LocatorResolver().resolve(spec, login_page)

        assert isinstance(outcome, AmbiguousMatch)
        assert outcome.candidate_count == 2
        assert outcome.strategies_attempted == ["attribute"]
        assert [a.strategy for a in outcome.attempts] == [
            "builtin", "id", "test_attribute", "name", "attribute", "anchored_path", "indexed_path",
        ]
        with pytest.raises(ResolutionError) as exc_info:
            outcome.unwrap()
        assert exc_info.value.outcome is outcome

    def test_id_match(self, login_page):
        outcome = resolve(LocatorSpec.where("id", "signup"), login_page)

        assert outcome.success
        assert outcome.strategy == "id"
        assert outcome.node.tag == "button"
        assert outcome.unwrap() is outcome.node

    def test_removed_id_downgrades_to_no_match(self, login_html):
        without_id = login_html.replace('id="signup" ', "")
        outcome = resolve(LocatorSpec.where("id", "signup"), snapshot_from_html(without_id))

        assert isinstance(outcome, NoMatch)
        assert outcome.strategies_attempted == ["id"]
        id_attempt = next(a for a in outcome.attempts if a.strategy == "id")
        assert id_attempt.count == 0

    def test_idempotent(self, login_page):
        resolver = LocatorResolver()
        spec = LocatorSpec.where("placeholder", "Password", tag="input")
        first = resolver.resolve(spec, login_page)
        second = resolver.resolve(spec, login_page)

        assert first.node is second.node
        assert first.strategy == second.strategy
        assert first.to_dict() == second.to_dict()
        assert first == second

    def test_accepts_locator_string_and_node_root(self, login_page):
        outcome = LocatorResolver().resolve('input[placeholder="Password"]', login_page.root)
        assert outcome.success
        assert outcome.node.get_attribute("type") == "password"


class TestPriority:
    def test_id_wins_and_short_circuits(self):
        page = snapshot_from_html(
            '<form><button id="go" data-testid="go" name="go">Go</button>'
            '<button data-testid="go">Go too</button></form>'
        )
        outcome = resolve(LocatorSpec.where("id", "go"), page)

        assert outcome.strategy == "id"
        assert [a.strategy for a in outcome.attempts] == ["builtin", "id"]

    def test_test_attribute_strategy(self, two_forms_page):
        outcome = resolve(parse_locator("[data-testid=submit] within #signup-form"), two_forms_page)
        assert outcome.strategy == "test_attribute"
        assert outcome.node.text_content == "Create account"

    def test_name_strategy(self, two_forms_page):
        outcome = resolve(parse_locator("input[name=email]"), two_forms_page)
        assert outcome.strategy == "name"
        assert outcome.node.get_attribute("placeholder") == "Email"

    def test_builtin_first_by_default(self, two_forms_page):
        outcome = resolve(parse_locator("link=Need help?"), two_forms_page)
        assert outcome.strategy == "builtin"
        assert outcome.node.get_attribute("href") == "/help"

    def test_order_is_configuration(self):
        page = snapshot_from_html('<a id="help" href="/help">Help</a>')
        spec = LocatorSpec(predicate=parse_locator("#help").predicate, text="Help")
        default = resolve(spec, page)
        id_first = resolve(spec, page, ResolverConfig(strategy_order=("id", "builtin")))

        assert default.strategy == "builtin"
        assert id_first.strategy == "id"
        assert [a.strategy for a in id_first.attempts] == ["id"]

    def test_chain_without_attribute_strategy(self, login_page):
        config = ResolverConfig(strategy_order=("id", "name"))
        outcome = resolve(LocatorSpec.where("placeholder", "Username"), login_page, config)
        assert isinstance(outcome, NoMatch)
        assert outcome.strategies_attempted == []


class TestAnchoring:
    def test_ancestor_picks_correct_of_two(self, two_forms_page):
        login = resolve(
            LocatorSpec.where("data-testid", "submit", tag="button", ancestor=LocatorSpec.where("id", "login-form")),
            two_forms_page,
        )
        signup = resolve(
            LocatorSpec.where("data-testid", "submit", tag="button", ancestor=LocatorSpec.where("id", "signup-form")),
            two_forms_page,
        )

        assert login.node.text_content == "Log in"
        assert signup.node.text_content == "Create account"
        assert login.node is not signup.node

    def test_without_ancestor_is_ambiguous(self, two_forms_page):
        outcome = resolve(LocatorSpec.where("data-testid", "submit"), two_forms_page)
        assert isinstance(outcome, AmbiguousMatch)
        assert outcome.candidate_count == 2

    def test_candidates_narrowed_by_resolved_ancestor(self, two_forms_page):
        # Both cards match the ancestor spec; only its index makes it unique
        outcome = resolve(parse_locator("button.buy within div.card >> nth=1"), two_forms_page)

        assert outcome.strategy == "attribute"
        attempt = outcome.attempts[-1]
        assert len(attempt.nodes) == 2
        assert attempt.narrowed_count == 1
        assert outcome.node.parent.children[0].text_content == "Pro"

    def test_only_searches_inside_ancestor_matches(self, two_forms_page):
        outcome = resolve(parse_locator("input[name=email] within #login-form"), two_forms_page)
        assert isinstance(outcome, NoMatch)

    def test_anchored_path_reports_unresolved_ancestor(self, two_forms_page):
        outcome = resolve(parse_locator("button.buy within div.missing"), two_forms_page)
        anchored = next(a for a in outcome.attempts if a.strategy == "anchored_path")
        assert anchored.applicable
        assert "unresolved" in anchored.detail
        assert isinstance(outcome, NoMatch)

    def test_anchored_path_used_when_attribute_unclaimed(self, two_forms_page):
        config = ResolverConfig(generic_attributes=("placeholder",))
        spec = parse_locator("button.buy within div.card >> nth=0")
        outcome = resolve(spec, two_forms_page, config)

        assert outcome.strategy == "anchored_path"
        assert outcome.node.parent.children[0].text_content == "Basic"


class TestIndex:
    def test_index_is_last_resort(self, login_page):
        spec = LocatorSpec.where("class", "form-control", tag="input", index=1)
        outcome = resolve(spec, login_page)

        assert outcome.strategy == "indexed_path"
        assert outcome.node.get_attribute("placeholder") == "Password"
        attribute_attempt = next(a for a in outcome.attempts if a.strategy == "attribute")
        assert attribute_attempt.count == 2

    def test_index_within_ancestor(self, two_forms_page):
        outcome = resolve(parse_locator("button[type=submit] >> nth=0 within #signup-form"), two_forms_page)
        # Only one submit button lives in the signup form, so no index needed
        assert outcome.strategy == "attribute"

    def test_index_out_of_range(self, login_page):
        spec = LocatorSpec.where("class", "form-control", tag="input", index=5)
        outcome = resolve(spec, login_page)

        assert isinstance(outcome, AmbiguousMatch)
        indexed = outcome.attempts[-1]
        assert indexed.strategy == "indexed_path"
        assert "out of range" in indexed.detail


class TestStaleness:
    def test_stale_snapshot_raises(self, login_page):
        login_page.invalidate()
        with pytest.raises(DetachedNodeError):
            resolve(LocatorSpec.where("id", "signup"), login_page)

    def test_probe_failure_raises(self, login_html):
        page = snapshot_from_html(login_html)
        page._probe = lambda: False
        with pytest.raises(DetachedNodeError):
            resolve(LocatorSpec.where("id", "signup"), page)

    def test_probe_asked_once_per_call(self, login_html):
        page = snapshot_from_html(login_html)
        calls = []
        page._probe = lambda: calls.append(1) or True

        outcome = resolve(LocatorSpec.where("class", "form-control", tag="input", index=1), page)

        assert outcome.strategy == "indexed_path"
        assert calls == [1]


class TestElementText:
    def test_text_spec_for_any_tag(self, login_page):
        outcome = resolve(LocatorSpec(tag="button", text="Sign up"), login_page)

        assert outcome.strategy == "builtin"
        assert outcome.attempts[0].detail == "element_text"
        assert outcome.node.get_attribute("id") == "signup"

    def test_partial_text_ambiguous(self, two_forms_page):
        outcome = resolve(parse_locator("button:partial_text=Buy"), two_forms_page)
        assert isinstance(outcome, AmbiguousMatch)
        assert outcome.strategies_attempted == ["builtin"]

    def test_text_with_ancestor(self, two_forms_page):
        outcome = resolve(parse_locator("button:text=Buy within div.card >> nth=1"), two_forms_page)
        assert outcome.node.parent.children[0].text_content == "Pro"

    def test_text_and_predicate(self, two_forms_page):
        spec = LocatorSpec(tag="button", predicate=parse_locator("[data-testid=submit]").predicate, text="Log in")
        outcome = resolve(spec, two_forms_page)

        assert outcome.strategy == "builtin"
        assert outcome.node.text_content == "Log in"
