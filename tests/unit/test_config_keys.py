"""Tests for the endpoint-to-key normalization used by write, update and lookup."""

import pytest

from lambdabot.services.config_store import derive_config_key


class TestDeriveConfigKey:
    def test_function_url_maps_to_first_hostname_label(self) -> None:
        url = "https://abc123xyz.lambda-url.ap-southeast-2.on.aws/"

        assert derive_config_key(url) == "abc123xyz"

    def test_hostname_without_scheme(self) -> None:
        assert derive_config_key("abc123xyz.lambda-url.ap-southeast-2.on.aws") == "abc123xyz"

    def test_bare_key_is_kept(self) -> None:
        assert derive_config_key("abc123") == "abc123"

    def test_key_is_lower_cased(self) -> None:
        assert derive_config_key("ABC123") == "abc123"
        assert derive_config_key("https://ABC123.lambda-url.eu-west-1.on.aws/") == "abc123"

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert derive_config_key("  abc123 \n") == "abc123"

    def test_url_with_path_and_query(self) -> None:
        url = "https://abc123.lambda-url.eu-west-1.on.aws/some/path?x=1"

        assert derive_config_key(url) == "abc123"

    def test_derivation_is_idempotent(self) -> None:
        url = "https://k9f2m4.lambda-url.us-east-1.on.aws/"

        assert derive_config_key(url) == derive_config_key(derive_config_key(url))

    @pytest.mark.parametrize("identifier", ["", "   ", None])
    def test_empty_identifier_is_rejected(self, identifier) -> None:
        with pytest.raises(ValueError):
            derive_config_key(identifier)

    @pytest.mark.parametrize("identifier", ["/", ".", "//", "...", "https://", "https:///path"])
    def test_identifier_without_key_is_rejected(self, identifier) -> None:
        with pytest.raises(ValueError):
            derive_config_key(identifier)
