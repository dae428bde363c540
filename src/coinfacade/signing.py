"""Request signing schemes for authenticated REST calls."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol
from urllib.parse import urlencode

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class SignatureScheme(Enum):
    """Supported authentication protocols."""

    HEADER_HMAC = "header_hmac"
    LEGACY_HMAC = "legacy_hmac"
    QUERY_HMAC = "query_hmac"


@dataclass(slots=True)
class Credentials:
    api_key: str
    api_secret: str
    customer_id: int | None = None


@dataclass(slots=True)
class SignedRequest:
    verb: str
    path: str
    body: str
    nonce: str
    timestamp: int | str
    signature: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)


class RequestSigner(Protocol):
    def sign(self, credentials: Credentials, verb: str, path: str, body: str = "") -> SignedRequest:
        ...


def hmac_sha256(secret: str, message: str) -> bytes:
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()


def _require_credentials(credentials: Credentials) -> None:
    if not credentials.api_key:
        raise ConfigurationError("API key is empty")
    if not credentials.api_secret:
        raise ConfigurationError("API secret is empty")


class HeaderHmacSigner:
    """HMAC-SHA256 over a canonical string, sent in X-Auth-* headers (Bitstamp v2)."""

    def __init__(
        self,
        domain: str,
        *,
        tag: str = "BITSTAMP",
        version: str = "v2",
        content_type: str = "application/x-www-form-urlencoded",
    ):
        self.domain = domain
        self.tag = tag
        self.version = version
        self.content_type = content_type

    def canonical_string(
        self,
        api_key: str,
        verb: str,
        path: str,
        nonce: str,
        timestamp: int,
        body: str,
    ) -> str:
        return (
            f"{self.tag} {api_key}{verb}{self.domain}{path}{self.content_type}"
            f"{nonce}{timestamp}{self.version}{body}"
        )

    def sign(
        self,
        credentials: Credentials,
        verb: str,
        path: str,
        body: str = "",
        *,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> SignedRequest:
        _require_credentials(credentials)
        if not path:
            raise ValueError("path is required")

        nonce = nonce or str(uuid.uuid1())
        timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        message = self.canonical_string(credentials.api_key, verb, path, nonce, timestamp, body)
        signature = hmac_sha256(credentials.api_secret, message).hex()

        headers = {
            "X-Auth": f"{self.tag} {credentials.api_key}",
            "X-Auth-Signature": signature,
            "X-Auth-Nonce": nonce,
            "X-Auth-Timestamp": str(timestamp),
            "X-Auth-Version": self.version,
            "Content-Type": self.content_type,
        }
        return SignedRequest(verb, path, body, nonce, timestamp, signature, headers=headers)


class LegacyHmacSigner:
    """Upper-case hex HMAC of nonce + customer id + key, embedded in the POST body."""

    def sign(
        self,
        credentials: Credentials,
        verb: str,
        path: str,
        body: str = "",
        *,
        nonce: int | None = None,
    ) -> SignedRequest:
        _require_credentials(credentials)
        if not credentials.customer_id:
            raise ConfigurationError("customer_id is required for legacy signing")

        # unique enough only because it is combined with customer id and key
        nonce = nonce or int(time.time() * 1000)
        message = f"{nonce}{credentials.customer_id}{credentials.api_key}"
        signature = hmac_sha256(credentials.api_secret, message).hex().upper()

        params = {
            "key": credentials.api_key,
            "signature": signature,
            "nonce": str(nonce),
        }
        return SignedRequest(verb, path, body, str(nonce), nonce, signature, params=params)


class QueryHmacSigner:
    """Base64 HMAC over method, host, path and the sorted query string (Huobi style)."""

    def __init__(self, host: str):
        self.host = host

    def canonical_string(self, verb: str, path: str, params: dict[str, Any]) -> str:
        return "\n".join([verb.upper(), self.host, path, urlencode(sorted(params.items()))])

    def sign(
        self,
        credentials: Credentials,
        verb: str,
        path: str,
        body: str = "",
        *,
        params: dict[str, Any] | None = None,
        timestamp: str | None = None,
    ) -> SignedRequest:
        _require_credentials(credentials)

        timestamp = timestamp or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
        signed_params: dict[str, Any] = {
            "AccessKeyId": credentials.api_key,
            "SignatureMethod": "HmacSHA256",
            "SignatureVersion": "2",
            "Timestamp": timestamp,
        }
        signed_params.update(params or {})

        message = self.canonical_string(verb, path, signed_params)
        signature = base64.b64encode(hmac_sha256(credentials.api_secret, message)).decode()
        signed_params["Signature"] = signature
        return SignedRequest(verb, path, body, timestamp, timestamp, signature, params=signed_params)


def sign(
    scheme: SignatureScheme,
    credentials: Credentials,
    verb: str,
    path: str,
    body: str = "",
    **options: Any,
) -> SignedRequest:
    """Sign a request with the given scheme.

    Args:
        scheme: Authentication protocol to use
        credentials: API key, secret and (for legacy signing) customer id
        verb: HTTP method
        path: Request path
        body: Raw request body
        **options: Scheme options, e.g. domain/host, nonce, timestamp, params

    Returns:
        SignedRequest carrying the signature and headers or params to send
    """
    if scheme is SignatureScheme.HEADER_HMAC:
        domain = options.pop("domain", None)
        if not domain:
            raise ConfigurationError("domain is required for HEADER_HMAC signing")
        return HeaderHmacSigner(domain).sign(credentials, verb, path, body, **options)
    if scheme is SignatureScheme.LEGACY_HMAC:
        return LegacyHmacSigner().sign(credentials, verb, path, body, **options)
    if scheme is SignatureScheme.QUERY_HMAC:
        host = options.pop("host", None)
        if not host:
            raise ConfigurationError("host is required for QUERY_HMAC signing")
        return QueryHmacSigner(host).sign(credentials, verb, path, body, **options)
    raise ValueError(f"Unsupported signature scheme: {scheme}")
