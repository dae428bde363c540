"""EOS action values and key checks used to build DEX transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import base58

EOS_TOKEN_CONTRACT = "eosio.token"
EOS_SYMBOL = "EOS"
EOS_QUANTITY_PRECISION = 4


@dataclass(slots=True, frozen=True)
class Authorization:
    actor: str
    permission: str = "active"


@dataclass(slots=True)
class ChainAction:
    """An unsigned EOS action, ready for an external signer/broadcaster."""

    account: str
    name: str
    authorization: list[Authorization]
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "name": self.name,
            "authorization": [
                {"actor": auth.actor, "permission": auth.permission} for auth in self.authorization
            ],
            "data": dict(self.data),
        }


def transfer_action(
    contract: str,
    sender: str,
    recipient: str,
    quantity: str,
    symbol: str,
    memo: str = "",
) -> ChainAction:
    return ChainAction(
        account=contract,
        name="transfer",
        authorization=[Authorization(sender)],
        data={
            "from": sender,
            "to": recipient,
            "quantity": f"{quantity} {symbol}",
            "memo": memo,
        },
    )


def send_eos_action(sender: str, recipient: str, quantity: str, memo: str = "") -> ChainAction:
    """Transfer native EOS; quantity must already carry four decimals."""
    if "." not in quantity or len(quantity.split(".")[1]) != EOS_QUANTITY_PRECISION:
        raise ValueError(f"EOS quantity must have {EOS_QUANTITY_PRECISION} decimals: {quantity}")
    return transfer_action(EOS_TOKEN_CONTRACT, sender, recipient, quantity, EOS_SYMBOL, memo)


def send_token_action(
    sender: str,
    recipient: str,
    symbol: str,
    contract: str,
    quantity: str,
    memo: str = "",
) -> ChainAction:
    return transfer_action(contract, sender, recipient, quantity, symbol, memo)


def is_valid_private_key(wif: str) -> bool:
    """Check a legacy WIF private key (base58check, 0x80 version byte)."""
    if not wif:
        return False
    try:
        payload = base58.b58decode_check(wif)
    except ValueError:
        return False
    return len(payload) == 33 and payload[0] == 0x80
