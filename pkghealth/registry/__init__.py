"""Package registry access."""

from pkghealth.registry.npm import NpmRegistryClient, validate_package_name, validate_version

__all__ = ["NpmRegistryClient", "validate_package_name", "validate_version"]
