from __future__ import annotations


class ProvisioningError(RuntimeError):
    """Base class for every error the provisioning tool raises on purpose."""


class FatalSetupError(ProvisioningError):
    """Aborts the human-triggered setup. Nothing applied so far is rolled back."""


class UnsupportedArchitectureError(FatalSetupError):
    pass


class ReleaseLookupError(FatalSetupError):
    pass


class InvalidManagementUrlError(FatalSetupError):
    pass


class FatalUnattendedError(ProvisioningError):
    """Aborts the current boot-time pass. The next boot retries from scratch."""


class ConfigMissingError(FatalUnattendedError):
    pass


class ArtifactMissingError(FatalUnattendedError):
    pass


class ArtifactError(ProvisioningError):
    """The cached archive exists but cannot be used."""
