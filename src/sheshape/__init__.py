"""
SheShape - client-side profile onboarding.

Packages:
- sheshape: settings, authenticated HTTP client, CLI
- onboarding: the progressive profile wizard engine
"""

__version__ = "1.0.0"
