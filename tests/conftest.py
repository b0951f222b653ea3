import os
from pathlib import Path

import pytest

from armforge.config.models import ArmForgeConfig, OutputSettings
from armforge.core.app import App
from armforge.core.stack import ResourceGroupStack, SubscriptionStack

# ============================================================================
# Construct Tree Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_armforge_env(monkeypatch):
    """Keep ARMFORGE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("ARMFORGE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def outdir(tmp_path) -> Path:
    """Provide an output directory that does not exist yet."""
    return tmp_path / "arm.out"


@pytest.fixture
def app(outdir) -> App:
    """Provide an App writing to a temporary directory."""
    config = ArmForgeConfig(output=OutputSettings(outdir=outdir))
    return App(config=config)


@pytest.fixture
def subscription_stack(app) -> SubscriptionStack:
    """Provide the dp/authr/nonprod/eastus subscription stack."""
    return SubscriptionStack(
        app,
        "Foundation",
        organization="dp",
        project="authr",
        environment="nonprod",
        geography="eastus",
        instance=1,
        subscription_id="00000000-0000-0000-0000-000000000001",
    )


@pytest.fixture
def rg_stack(subscription_stack) -> ResourceGroupStack:
    """Provide a resource group stack with a fixed resource group name."""
    return ResourceGroupStack(
        subscription_stack, "Network", resource_group_name="rg-network"
    )
