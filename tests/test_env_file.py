"""Tests for .env materialisation."""

from __future__ import annotations

import itertools

from supahost.services.env_file import (
    generate_secret,
    get_env_var,
    materialize_env,
    needs_secret,
    set_env_var,
)
from tests.conftest import EXAMPLE_ENV


def _counter_factory():
    counter = itertools.count(1)
    return lambda nbytes: f"generated-{next(counter)}-{nbytes}"


class TestSetEnvVar:
    def test_replaces_existing_line_in_place(self):
        content = "A=1\nB=2\nC=3\n"
        assert set_env_var(content, "B", "x") == "A=1\nB=x\nC=3\n"

    def test_appends_missing_key(self):
        assert set_env_var("A=1\n", "B", "2") == "A=1\nB=2\n"

    def test_appends_after_missing_newline(self):
        assert set_env_var("A=1", "B", "2") == "A=1\nB=2\n"

    def test_empty_content(self):
        assert set_env_var("", "A", "1") == "A=1\n"

    def test_prefix_key_not_matched(self):
        content = "JWT_SECRET_OLD=keep\n"
        assert set_env_var(content, "JWT_SECRET", "new") == "JWT_SECRET_OLD=keep\nJWT_SECRET=new\n"

    def test_commented_key_not_matched(self):
        content = "# SITE_URL=old\n"
        assert set_env_var(content, "SITE_URL", "new") == "# SITE_URL=old\nSITE_URL=new\n"

    def test_special_characters_literal(self):
        content = "P=old\n"
        assert set_env_var(content, "P", r"a/b&c\1") == "P=a/b&c\\1\n"


class TestGetEnvVar:
    def test_present(self):
        assert get_env_var("A=1\nB=two words\n", "B") == "two words"

    def test_absent(self):
        assert get_env_var("A=1\n", "B") is None

    def test_empty(self):
        assert get_env_var("A=\n", "A") == ""


class TestNeedsSecret:
    def test_placeholder(self):
        assert needs_secret("POSTGRES_PASSWORD=your-super-secret-and-long-postgres-password\n", "POSTGRES_PASSWORD")

    def test_legacy_placeholder(self):
        assert needs_secret("POSTGRES_PASSWORD=YOUR_POSTGRES_PASSWORD\n", "POSTGRES_PASSWORD")

    def test_missing_or_empty(self):
        assert needs_secret("", "JWT_SECRET")
        assert needs_secret("JWT_SECRET=\n", "JWT_SECRET")

    def test_customised(self):
        assert not needs_secret("DASHBOARD_PASSWORD=hunter2-but-longer\n", "DASHBOARD_PASSWORD")


class TestMaterializeEnv:
    def test_fresh_example_gets_secrets_and_urls(self):
        content, changed = materialize_env(EXAMPLE_ENV, "api.example.com", secret_factory=_counter_factory())
        assert get_env_var(content, "POSTGRES_PASSWORD") == "generated-1-32"
        assert get_env_var(content, "JWT_SECRET") == "generated-2-64"
        assert get_env_var(content, "DASHBOARD_PASSWORD") == "generated-3-32"
        assert get_env_var(content, "SITE_URL") == "https://api.example.com"
        assert get_env_var(content, "API_EXTERNAL_URL") == "https://api.example.com"
        assert get_env_var(content, "SUPABASE_PUBLIC_URL") == "https://api.example.com"
        assert get_env_var(content, "ANON_KEY") == "YOUR_ANON_KEY"
        assert get_env_var(content, "SERVICE_ROLE_KEY") == "YOUR_SERVICE_KEY"
        assert changed[:3] == ["POSTGRES_PASSWORD", "JWT_SECRET", "DASHBOARD_PASSWORD"]

    def test_ip_uses_http_urls(self):
        content, _ = materialize_env(EXAMPLE_ENV, "203.0.113.5")
        assert get_env_var(content, "SITE_URL") == "http://203.0.113.5"
        assert get_env_var(content, "API_EXTERNAL_URL") == "http://203.0.113.5"

    def test_urls_always_overwritten(self):
        first, _ = materialize_env(EXAMPLE_ENV, "old.example.com")
        second, _ = materialize_env(first, "203.0.113.5")
        assert get_env_var(second, "SITE_URL") == "http://203.0.113.5"
        assert get_env_var(second, "SUPABASE_PUBLIC_URL") == "http://203.0.113.5"

    def test_ports_forced(self):
        content = EXAMPLE_ENV.replace("KONG_HTTP_PORT=8000", "KONG_HTTP_PORT=9999")
        out, _ = materialize_env(content, "api.example.com")
        assert get_env_var(out, "KONG_HTTP_PORT") == "8000"
        assert get_env_var(out, "KONG_HTTPS_PORT") == "8443"

    def test_customised_secret_survives_reruns(self):
        content = EXAMPLE_ENV.replace(
            "POSTGRES_PASSWORD=your-super-secret-and-long-postgres-password",
            "POSTGRES_PASSWORD=operator-chosen",
        )
        once, _ = materialize_env(content, "api.example.com")
        twice, changed = materialize_env(once, "api.example.com")
        assert get_env_var(once, "POSTGRES_PASSWORD") == "operator-chosen"
        assert get_env_var(twice, "POSTGRES_PASSWORD") == "operator-chosen"
        assert "POSTGRES_PASSWORD" not in changed

    def test_generated_secrets_stable_on_rerun(self):
        once, _ = materialize_env(EXAMPLE_ENV, "api.example.com")
        twice, changed = materialize_env(once, "api.example.com")
        for key in ("POSTGRES_PASSWORD", "JWT_SECRET", "DASHBOARD_PASSWORD"):
            assert get_env_var(twice, key) == get_env_var(once, key)
            assert key not in changed

    def test_placeholder_regenerated_each_run(self):
        first, _ = materialize_env(EXAMPLE_ENV, "api.example.com")
        second, _ = materialize_env(EXAMPLE_ENV, "api.example.com")
        assert get_env_var(first, "JWT_SECRET") != get_env_var(second, "JWT_SECRET")

    def test_missing_keys_appended(self):
        out, _ = materialize_env("OTHER=1\n", "api.example.com", secret_factory=_counter_factory())
        lines = out.splitlines()
        assert lines[0] == "OTHER=1"
        assert "POSTGRES_PASSWORD=generated-1-32" in lines
        assert "KONG_HTTPS_PORT=8443" in lines

    def test_unrelated_lines_and_order_preserved(self):
        out, _ = materialize_env(EXAMPLE_ENV, "api.example.com")
        before = [line.split("=", 1)[0] for line in EXAMPLE_ENV.splitlines()]
        after = [line.split("=", 1)[0] for line in out.splitlines()]
        assert after == before
        assert "DASHBOARD_USERNAME=supabase" in out.splitlines()

    def test_api_key_reset_can_be_disabled(self):
        out, changed = materialize_env(EXAMPLE_ENV, "api.example.com", reset_api_keys=False)
        assert get_env_var(out, "ANON_KEY") == "eyJhbGciOiJIUzI1NiJ9.example-anon"
        assert "ANON_KEY" not in changed


class TestGenerateSecret:
    def test_url_safe_and_long(self):
        secret = generate_secret(64)
        assert len(secret) >= 64
        assert "/" not in secret and "+" not in secret and "\n" not in secret

    def test_unique(self):
        assert generate_secret(32) != generate_secret(32)
