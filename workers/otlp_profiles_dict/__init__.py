"""
otlp_profiles_dict — OTLP profiles migration from per-profile tables
(v1experimental) to a shared batch dictionary (v1development).
"""

__version__ = "0.1.0"
CONVERTER_VERSION = "v0"
PACKAGE_NAME = "otlp_profiles_dict"
SCHEMA_VERSION = "0.1"
