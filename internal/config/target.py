# internal/config/target.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from internal.client.concourse import DEFAULT_TIMEOUT
from internal.errors import TargetError

logger = logging.getLogger(__name__)

DEFAULT_TEAM = "main"


class TargetSettings(BaseSettings):
    """VOLYARD_* environment overrides. Unset fields leave the rc target alone."""

    model_config = SettingsConfigDict(
        env_prefix="VOLYARD_",
        env_ignore_empty=True,
        extra="ignore",
    )

    target: Optional[str] = None
    rc: Optional[Path] = None
    api: Optional[str] = None
    team: Optional[str] = None
    token: Optional[str] = None
    insecure: Optional[bool] = None
    timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("api")
    @classmethod
    def _strip_api(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().rstrip("/") if v else v

    def overrides(self) -> Dict[str, Any]:
        fields = ("api", "team", "token", "insecure", "timeout")
        return {k: getattr(self, k) for k in fields if getattr(self, k) is not None}


@dataclass(frozen=True)
class Target:
    name: Optional[str]
    api: str = ""
    team: str = DEFAULT_TEAM
    token: Optional[str] = None
    insecure: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        if not self.api:
            label = f"target '{self.name}'" if self.name else "no target selected and"
            raise TargetError(f"{label} has no API URL; use --target or set VOLYARD_API")
        if not self.api.startswith(("http://", "https://")):
            raise TargetError(f"invalid API URL: {self.api}")
        if not self.team:
            raise TargetError("no team configured for target")


def load_settings() -> TargetSettings:
    try:
        return TargetSettings()
    except ValidationError as e:
        raise TargetError(f"invalid VOLYARD_* environment: {e}") from e


def default_rc_path(settings: TargetSettings) -> Path:
    if settings.rc:
        return settings.rc.expanduser()
    return Path.home() / ".flyrc"


def _load_rc(rc_path: Path) -> Dict[str, Any]:
    if not rc_path.exists():
        return {}
    try:
        data = yaml.safe_load(rc_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise TargetError(f"could not parse {rc_path}: {e}") from e
    if not isinstance(data, dict):
        raise TargetError(f"{rc_path}: root must be a mapping")
    return data


def _target_from_rc(name: str, rc: Dict[str, Any], rc_path: Path) -> Target:
    targets = rc.get("targets") or {}
    entry = targets.get(name) if isinstance(targets, dict) else None
    if not isinstance(entry, dict):
        raise TargetError(f"unknown target: {name} (not found in {rc_path})")

    token = entry.get("token") or {}
    token_value = token.get("value") if isinstance(token, dict) else None

    return Target(
        name=name,
        api=str(entry.get("api") or ""),
        team=str(entry.get("team") or DEFAULT_TEAM),
        token=str(token_value) if token_value else None,
        insecure=bool(entry.get("insecure", False)),
    )


def load_target(
    name: Optional[str] = None,
    rc_path: Optional[Path] = None,
    settings: Optional[TargetSettings] = None,
) -> Target:
    """
    Resolve the target to query: named rc entry first, then env overrides.
    """
    settings = settings or load_settings()
    name = name or settings.target
    rc_path = rc_path or default_rc_path(settings)

    target = Target(name=name)
    if name:
        target = _target_from_rc(name, _load_rc(rc_path), rc_path)
        logger.debug("loaded target %s from %s", name, rc_path)

    overrides = settings.overrides()
    return replace(target, **overrides) if overrides else target
