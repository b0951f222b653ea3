"""
Tests for deterministic resource name generation.
"""

import hashlib
import re

import pytest

from armforge.config.models import NamingSettings
from armforge.naming.context import NamingContext
from armforge.naming.conventions import NamingConventions, NamingRule
from armforge.naming.generator import FILLER, ResourceNameGenerator, derive_purpose
from armforge.naming.validation import validate_resource_name


@pytest.fixture
def context() -> NamingContext:
    return NamingContext.create("dp", "authr", "nonprod", "eastus", 1)


@pytest.fixture
def generator() -> ResourceNameGenerator:
    return ResourceNameGenerator()


class TestDerivePurpose:
    """Test cases for purpose tokens."""

    @pytest.mark.parametrize(
        "construct_id,expected",
        [
            ("DataRG", "datarg"),
            ("web-subnet", "websubnet"),
            ("Key_Vault 2", "keyvault2"),
        ],
    )
    def test_derive_purpose(self, construct_id, expected):
        assert derive_purpose(construct_id) == expected


class TestGenerateName:
    """Test cases for ResourceNameGenerator.generate_name."""

    def test_resource_group_name(self, generator, context):
        """Test the canonical resource group name."""
        assert (
            generator.generate_name("rg", context, "datarg")
            == "rg-dp-authr-datarg-nonprod-eus-01"
        )

    def test_purpose_omitted(self, generator, context):
        """Test that an empty purpose drops the segment."""
        name = generator.generate_name("vnet", context)

        assert name == "vnet-dp-authr-nonprod-eus-01"

    def test_deterministic(self, generator, context):
        """Test that the same inputs always give the same name."""
        names = {generator.generate_name("st", context, "data") for _ in range(5)}

        assert len(names) == 1

    def test_only_purpose_segment_changes(self, generator, context):
        """Test that changing the purpose changes only that segment."""
        first = generator.generate_name("nsg", context, "web").split("-")
        second = generator.generate_name("nsg", context, "app").split("-")

        differing = [i for i, (a, b) in enumerate(zip(first, second)) if a != b]
        assert differing == [3]

    def test_storage_account_name(self, generator, context):
        """Test hyphen removal, the length ceiling and the hash suffix."""
        name = generator.generate_name("st", context, "data")
        candidate = "stdpauthrdatanonprodeus01"
        digest = hashlib.sha256(candidate.encode("utf-8")).hexdigest()[:6]

        assert len(name) <= 24
        assert re.match(r"^[a-z0-9]+$", name)
        assert name == candidate[:18] + digest
        assert validate_resource_name(name, "st").valid

    def test_globally_unique_names_differ_by_purpose(self, generator, context):
        """Test that truncated names stay distinct through the hash."""
        a = generator.generate_name("st", context, "datalake01")
        b = generator.generate_name("st", context, "datalake02")

        assert a != b

    def test_key_vault_name(self, generator, context):
        """Test that key vault names fit 24 characters and keep hyphens."""
        name = generator.generate_name("kv", context, "secrets")

        assert len(name) <= 24
        assert name.startswith("kv-")
        assert "--" not in name
        assert validate_resource_name(name, "kv").valid

    def test_long_name_truncated_without_trailing_separator(self, generator):
        """Test the length ceiling for non-unique kinds."""
        rule = NamingRule(kind="short", prefix="x", max_length=12)

        name = generator.apply_rule("x-org-project-env-eus-01", rule)

        assert name == "x-org-projec"
        assert not name.endswith("-")

    def test_must_start_with_letter_repair(self, generator):
        """Test that a filler letter is prepended when required."""
        rule = NamingRule(kind="k", prefix="", must_start_with_letter=True)

        assert generator.apply_rule("1abc", rule) == FILLER + "1abc"

    def test_minimum_length_padding(self, generator):
        """Test padding short names up to the minimum length."""
        rule = NamingRule(kind="k", prefix="", min_length=5)

        assert generator.apply_rule("ab", rule) == "abxxx"

    def test_trailing_separator_repaired(self, generator):
        """Test that names never end in a separator."""
        rule = NamingRule(kind="k", prefix="", max_length=4)

        assert generator.apply_rule("abc-def", rule) == "abc"


class TestConfiguredConventions:
    """Test cases for conventions built from NamingSettings."""

    def test_prefix_override(self, context):
        """Test that prefix overrides replace the built-in prefix."""
        conventions = NamingConventions.from_settings(
            NamingSettings(prefix_overrides={"rg": "RSG"})
        )

        name = ResourceNameGenerator(conventions).generate_name("rg", context, "data")

        assert name == "rsg-dp-authr-data-nonprod-eus-01"

    def test_separator_override(self, context):
        """Test a custom separator."""
        conventions = NamingConventions.from_settings(NamingSettings(separator="_"))

        name = ResourceNameGenerator(conventions).generate_name("nsg", context, "web")

        assert name == "nsg_dp_authr_web_nonprod_eus_01"

    def test_key_vault_keeps_hyphen_separator(self, context):
        """Test that key vaults use hyphens whatever the configured separator."""
        conventions = NamingConventions.from_settings(NamingSettings(separator="_"))

        name = ResourceNameGenerator(conventions).generate_name("kv", context, "s")

        assert "_" not in name
        assert validate_resource_name(name, "kv").valid

    def test_max_length_override_only_tightens(self):
        """Test that overrides cannot exceed the provider limit."""
        conventions = NamingConventions.from_settings(
            NamingSettings(max_length_overrides={"st": 100, "rg": 40})
        )

        assert conventions.rule_for("st").max_length == 24
        assert conventions.rule_for("rg").max_length == 40

    def test_hash_length(self, context):
        """Test a longer hash suffix."""
        conventions = NamingConventions.from_settings(NamingSettings(hash_length=10))
        name = ResourceNameGenerator(conventions).generate_name("st", context, "data")
        candidate = "stdpauthrdatanonprodeus01"
        digest = hashlib.sha256(candidate.encode("utf-8")).hexdigest()[:10]

        assert name.endswith(digest)
        assert len(name) == 24

    def test_unknown_kind_uses_default_rule(self):
        """Test that unknown kinds get the default rule with their own prefix."""
        rule = NamingConventions().rule_for("appi")

        assert rule.prefix == "appi"
        assert rule.max_length == 64
