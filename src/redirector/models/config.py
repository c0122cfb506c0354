"""Pydantic configuration model for redirect following."""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_PROTOCOLS = frozenset({"http", "https"})


class RedirectConfig(BaseModel):
    """
    Redirect policy for one logical request.

    Values are validated once at construction and the model is frozen,
    so a config can be shared between chains without copying.

    Example:
        config = RedirectConfig(max=3, referer=True)

    YAML format:
        max: 3
        strict: false
        referer: true
        protocols: [https]
        track_history: true
    """

    max: int = Field(5, ge=0, description="Maximum redirects to follow before failing")
    strict: bool = Field(
        False,
        description="Keep the original method and body on 301/302 instead of switching to GET",
    )
    referer: bool = Field(False, description="Add a Referer header when following redirects")
    protocols: frozenset[str] = Field(
        DEFAULT_PROTOCOLS,
        description="URI schemes a redirect is allowed to target",
    )
    track_history: bool = Field(
        False,
        alias="trackHistory",
        description="Record followed redirect URIs on the final response",
    )

    model_config = {"extra": "forbid", "frozen": True, "populate_by_name": True}

    @field_validator("protocols", mode="before")
    @classmethod
    def _normalize_protocols(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            value = frozenset(str(p).lower().rstrip(":") for p in value)
            if not value:
                raise ValueError("At least one redirect protocol must be allowed")
        return value

    @classmethod
    def coerce(cls, value: Any) -> Optional["RedirectConfig"]:
        """
        Turn caller-supplied redirect options into a config.

        Args:
            value: None, False or any other empty value to disable
                redirects, True for defaults, a dict of overrides, or a
                RedirectConfig

        Returns:
            RedirectConfig, or None when redirects are disabled

        Raises:
            TypeError: If the value is not one of the accepted forms
            pydantic.ValidationError: If a dict holds invalid options
        """
        if isinstance(value, cls):
            return value
        if not value:
            return None
        if value is True:
            return cls()
        if isinstance(value, dict):
            return cls.model_validate(value)
        raise TypeError(f"Redirect options must be a bool, dict or RedirectConfig, not {type(value).__name__}")

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        data = self.model_dump(mode="json")
        data["protocols"] = sorted(self.protocols)
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "RedirectConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "RedirectConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
