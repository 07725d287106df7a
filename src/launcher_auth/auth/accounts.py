"""Stored account records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class AccountType(str, Enum):
    LEGACY = "legacy"
    FEDERATED = "federated"
    CRACKED = "cracked"


@dataclass
class FederatedSession:
    """Microsoft OAuth session backing a federated account."""

    access_token: str
    refresh_token: str
    expires_at: int  # epoch ms

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FederatedSession":
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
        )


@dataclass
class Account:
    """Fields shared by every account kind."""

    type: ClassVar[AccountType]

    uuid: str
    display_name: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "uuid": self.uuid,
            "display_name": self.display_name,
        }

    @staticmethod
    def from_dict(data: dict) -> "Account":
        """Create the matching account subclass from a dictionary."""
        account_type = AccountType(data["type"])
        if account_type is AccountType.LEGACY:
            return LegacyAccount(
                uuid=data["uuid"],
                display_name=data["display_name"],
                access_token=data["access_token"],
                username=data.get("username", ""),
            )
        if account_type is AccountType.FEDERATED:
            return FederatedAccount(
                uuid=data["uuid"],
                display_name=data["display_name"],
                access_token=data["access_token"],
                expires_at=int(data["expires_at"]),
                session=FederatedSession.from_dict(data["session"]),
            )
        return CrackedAccount(uuid=data["uuid"], display_name=data["display_name"])


@dataclass
class LegacyAccount(Account):
    type: ClassVar[AccountType] = AccountType.LEGACY

    access_token: str = ""
    username: str = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["access_token"] = self.access_token
        data["username"] = self.username
        return data


@dataclass
class FederatedAccount(Account):
    """Account signed in through Microsoft.

    ``access_token``/``expires_at`` are the game token; ``session`` holds the
    Microsoft tokens used to obtain a new one.
    """

    type: ClassVar[AccountType] = AccountType.FEDERATED

    access_token: str = ""
    expires_at: int = 0  # epoch ms
    session: FederatedSession = field(
        default_factory=lambda: FederatedSession(access_token="", refresh_token="", expires_at=0)
    )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["access_token"] = self.access_token
        data["expires_at"] = self.expires_at
        data["session"] = self.session.to_dict()
        return data


@dataclass
class CrackedAccount(Account):
    """Offline account identified only by its username."""

    type: ClassVar[AccountType] = AccountType.CRACKED
