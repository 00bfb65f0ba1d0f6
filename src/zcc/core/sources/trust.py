"""Trust decisions for pack sources and an audit trail of installs.

State lives under ``.zcc/security/``:

- ``trust-policy.json``: the active :class:`TrustPolicy`
- ``trusted-sources.json``: explicitly trusted source ids
- ``trust-records.json``: one record per audited installation
"""
from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from zcc.core.packs.models import PackStructure
from zcc.core.utils.io import read_json, write_json_atomic
from zcc.core.utils.time import utc_timestamp

logger = logging.getLogger(__name__)

UNUSUAL_COMPONENT_COUNT = 50

# Policy keys are persisted in camelCase.
_POLICY_KEYS = {
    "allow_untrusted_sources": "allowUntrustedSources",
    "require_user_consent": "requireUserConsent",
    "audit_installations": "auditInstallations",
    "max_pack_size": "maxPackSize",
    "allowed_domains": "allowedDomains",
    "blocked_domains": "blockedDomains",
    "trusted_authors": "trustedAuthors",
    "trusted_sources": "trustedSources",
}


@dataclass
class TrustPolicy:
    allow_untrusted_sources: bool = False
    require_user_consent: bool = True
    audit_installations: bool = True
    max_pack_size: int = 10 * 1024 * 1024
    allowed_domains: List[str] = field(default_factory=lambda: ["github.com", "gitlab.com"])
    blocked_domains: List[str] = field(default_factory=list)
    trusted_authors: List[str] = field(default_factory=lambda: ["zcc", "zcc-community"])
    trusted_sources: List[str] = field(default_factory=lambda: ["local", "zcc-official"])

    def to_dict(self) -> Dict[str, Any]:
        return {_POLICY_KEYS[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrustPolicy:
        policy = cls()
        for attr, key in _POLICY_KEYS.items():
            if key in data:
                setattr(policy, attr, data[key])
        return policy


@dataclass
class SecurityValidationResult:
    valid: bool = True
    trusted: bool = False
    requires_consent: bool = False
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "trusted": self.trusted,
            "requiresConsent": self.requires_consent,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


def extract_domain(location: str) -> Optional[str]:
    parsed = urlparse(location)
    if parsed.scheme in ("http", "https") and parsed.hostname:
        return parsed.hostname
    return None


class TrustManager:
    def __init__(self, project_root: Path) -> None:
        self.security_dir = Path(project_root) / ".zcc" / "security"
        self.policy_path = self.security_dir / "trust-policy.json"
        self.records_path = self.security_dir / "trust-records.json"
        self.trusted_sources_path = self.security_dir / "trusted-sources.json"
        self.policy = TrustPolicy()
        self._records: List[Dict[str, Any]] = []
        self._trusted: Dict[str, Dict[str, Any]] = {}

    def initialize(self) -> None:
        self.security_dir.mkdir(parents=True, exist_ok=True)

        if self.policy_path.exists():
            try:
                self.policy = TrustPolicy.from_dict(read_json(self.policy_path))
            except (OSError, ValueError, AttributeError) as e:
                logger.warning("Failed to load trust policy, using defaults: %s", e)
        else:
            self._save_policy()

        try:
            records = read_json(self.records_path, default=[])
            self._records = list(records) if isinstance(records, list) else []
        except (OSError, ValueError) as e:
            logger.warning("Failed to load trust records: %s", e)
            self._records = []

        if self.trusted_sources_path.exists():
            try:
                self._trusted = dict(read_json(self.trusted_sources_path))
            except (OSError, ValueError, TypeError) as e:
                logger.warning("Failed to load trusted sources: %s", e)
        else:
            self.add_trusted_source("local", {"type": "local", "trusted": True})

    def _save_policy(self) -> None:
        write_json_atomic(self.policy_path, self.policy.to_dict())

    # ------------------------------------------------------------------
    # Trusted sources
    # ------------------------------------------------------------------
    def add_trusted_source(self, source_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {"trusted": True, "addedAt": utc_timestamp()}
        entry.update(details or {})
        self._trusted[source_id] = entry
        write_json_atomic(self.trusted_sources_path, self._trusted)

    def remove_trusted_source(self, source_id: str) -> None:
        self._trusted.pop(source_id, None)
        write_json_atomic(self.trusted_sources_path, self._trusted)

    def is_trusted_source(self, source_id: str) -> bool:
        return source_id in self._trusted or source_id in self.policy.trusted_sources

    def get_trusted_sources(self) -> List[str]:
        ids = list(self._trusted)
        ids += [s for s in self.policy.trusted_sources if s not in self._trusted]
        return ids

    def update_policy(self, **changes: Any) -> TrustPolicy:
        for key, value in changes.items():
            if key not in _POLICY_KEYS:
                raise ValueError(f"Unknown trust policy field: {key}")
            setattr(self.policy, key, value)
        self._save_policy()
        return self.policy

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_source(self, source) -> SecurityValidationResult:
        result = SecurityValidationResult()
        info = source.get_source_info()
        if self.is_trusted_source(str(info.get("name", ""))):
            result.trusted = True
            return result

        if info.get("type") and info.get("type") != "local":
            domain = extract_domain(str(info.get("path", "")))
            if domain:
                if domain in self.policy.blocked_domains:
                    result.valid = False
                    result.errors.append(f"Source domain {domain} is blocked")
                    return result
                if self.policy.allowed_domains and domain not in self.policy.allowed_domains:
                    result.warnings.append(f"Source domain {domain} is not in allowed list")
                    result.requires_consent = True
            if not self.policy.allow_untrusted_sources:
                result.requires_consent = True
                result.warnings.append("Source is not trusted and requires user consent")
        return result

    def validate_pack(self, pack: PackStructure, source) -> SecurityValidationResult:
        manifest = pack.manifest
        result = SecurityValidationResult(trusted=manifest.author in self.policy.trusted_authors)

        if manifest.hooks:
            result.warnings.append(f"Pack registers {len(manifest.hooks)} hooks that will modify assistant behavior")
            if not result.trusted:
                result.requires_consent = True
        if manifest.post_install:
            result.warnings.append("Pack contains post-install commands (disabled for security)")

        count = sum(len(manifest.components_of(t)) for t in ("modes", "workflows", "agents"))
        if count > UNUSUAL_COMPONENT_COUNT:
            result.warnings.append(f"Pack contains {count} components, which is unusually high")

        source_result = self.validate_source(source)
        result.warnings.extend(source_result.warnings)
        result.errors.extend(source_result.errors)
        result.valid = result.valid and source_result.valid
        result.requires_consent = result.requires_consent or source_result.requires_consent
        return result

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------
    def record_installation(self, source, pack: PackStructure, user_consent: bool) -> None:
        if not self.policy.audit_installations:
            return
        manifest_json = json.dumps(pack.manifest.to_dict(), sort_keys=True)
        self._records.append(
            {
                "sourceId": source.get_source_info().get("name"),
                "packName": pack.manifest.name,
                "packVersion": pack.manifest.version,
                "author": pack.manifest.author,
                "timestamp": utc_timestamp(),
                "action": "installed",
                "userConsent": bool(user_consent),
                "checksum": hashlib.sha256(manifest_json.encode("utf-8")).hexdigest(),
            }
        )
        write_json_atomic(self.records_path, self._records)

    def get_installation_history(self, pack_name: Optional[str] = None) -> List[Dict[str, Any]]:
        if pack_name:
            return [r for r in self._records if r.get("packName") == pack_name]
        return list(self._records)


__all__ = ["SecurityValidationResult", "TrustManager", "TrustPolicy", "extract_domain"]
