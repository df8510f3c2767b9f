"""Configuration module for the Okta client."""
from .settings import OktaConfig, load_settings

__all__ = ["OktaConfig", "load_settings"]
