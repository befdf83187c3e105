"""
Deployment errors — the typed failures a deploy can abort with.

Every error carries a short code and a message with enough context
(kind, reference, source value, account) to diagnose the failure
without re-running the deployment. Errors abort the remaining stages;
a deploy returns either a complete result or raises one of these.
"""

from __future__ import annotations


class DeployError(Exception):
    """Base exception for deployment failures."""

    code = "E000"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.code}: {message}")


class ConfigError(DeployError):
    """Raised when deployer configuration is invalid or missing."""

    code = "E100"


class UnsupportedSourceError(DeployError):
    """The request names a manifest source this deployer doesn't know."""

    code = "E101"

    def __init__(self, source: object):
        self.source = source
        super().__init__(f"Unsupported manifest source: {source!r}")


class ArtifactFetchError(DeployError):
    """A by-reference manifest couldn't be downloaded or parsed."""

    code = "E102"

    def __init__(self, reference: str, reason: str = ""):
        self.reference = reference
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to fetch artifact '{reference}'{detail}")


class UnknownKindError(DeployError):
    """No resource properties are registered for a manifest kind."""

    code = "E103"

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"No resource properties registered for kind '{kind}'")


class SubmissionError(DeployError):
    """The cluster rejected (or never received) the prepared manifest."""

    code = "E104"

    def __init__(self, kind: str, name: str, reason: str):
        self.kind = kind
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to submit {kind} '{name}': {reason}")


class AccountNotFoundError(DeployError):
    """The requested account has no credentials in deployer.yml."""

    code = "E105"

    def __init__(self, account: str, available: list[str] | None = None):
        self.account = account
        known = ", ".join(available) if available else "none configured"
        super().__init__(f"Account '{account}' not found. Available: {known}")


class InvalidManifestError(DeployError):
    """The manifest can't be deployed as written (e.g. it has no name)."""

    code = "E106"

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind or 'manifest'}: {reason}")
