"""Settings tests."""

import pytest
from pydantic import ValidationError

from mathfoundry.config import Settings
from mathfoundry.features.tiers import SubscriptionTier


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MF_UNLOCK_BUFFER", raising=False)
        monkeypatch.delenv("MF_DEV_TIER_OVERRIDE", raising=False)
        settings = Settings(_env_file=None)
        assert settings.unlock_buffer == 1
        assert settings.dev_tier_override is None

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, unlock_buffer=-1)

    def test_override_from_env(self, monkeypatch):
        monkeypatch.setenv("MF_DEV_TIER_OVERRIDE", "vip")
        monkeypatch.setenv("MF_ENVIRONMENT", "development")
        settings = Settings(_env_file=None)
        assert settings.effective_dev_override is SubscriptionTier.VIP

    def test_override_ignored_in_production(self):
        settings = Settings(_env_file=None, environment="production", dev_tier_override=SubscriptionTier.VIP)
        assert settings.is_production
        assert settings.effective_dev_override is None
