from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr, model_validator

from .eos import is_valid_private_key


class ExchangeCredentials(BaseModel):
    api_key: SecretStr
    api_secret: SecretStr
    customer_id: int | None = None
    account_id: int | None = None

    model_config = {"extra": "forbid"}


class ExchangeSettings(BaseModel):
    enabled: bool = True
    credentials: ExchangeCredentials | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class EosSettings(BaseModel):
    account: str = ""
    private_key: SecretStr | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _check_private_key(self) -> "EosSettings":
        if self.account:
            key = self.private_key.get_secret_value() if self.private_key else ""
            if not is_valid_private_key(key):
                raise ValueError(f"Invalid EOS private key for account {self.account}")
        return self

    @property
    def configured(self) -> bool:
        return bool(self.account) and self.private_key is not None


class Settings(BaseModel):
    env: str = "dev"
    markets_file: str = "markets.yml"
    eos: EosSettings = Field(default_factory=EosSettings)
    exchanges: dict[str, ExchangeSettings] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        for exch in data.get("exchanges", {}).values():
            creds = exch.get("credentials")
            if isinstance(creds, dict):
                if "api_key" in creds:
                    creds["api_key"] = "***"
                if "api_secret" in creds:
                    creds["api_secret"] = "***"
        eos = data.get("eos")
        if isinstance(eos, dict) and eos.get("private_key") is not None:
            eos["private_key"] = "***"
        return data
