# backend/modules/feedback/tests/test_config.py

import pytest
from pydantic import ValidationError

from core.config import Settings


class TestSettings:
    """Environment handling in Settings"""

    def test_production_rejects_default_jwt_secret(self):
        with pytest.raises(ValidationError):
            Settings(environment="production")

    def test_production_with_real_secret(self):
        settings = Settings(environment="Production", jwt_secret_key="s3cr3t-value")

        assert settings.is_production is True

    def test_development_allows_default_secret(self):
        settings = Settings(environment="development")

        assert settings.is_production is False

    def test_cors_origins_from_comma_separated_string(self):
        settings = Settings(cors_origins="http://a.test, http://b.test")

        assert settings.cors_origins == ["http://a.test", "http://b.test"]
