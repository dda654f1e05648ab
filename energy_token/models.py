"""
Data models for the Energy Token ledger
"""

from enum import Enum
from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from energy_token.settings import settings

# Standard burn principal; never a valid admin, minter or transfer target
NULL_ADDRESS = "SP000000000000000000002Q6VF78"


class SourceType(str, Enum):
    """Well-known energy source labels"""
    SOLAR = "solar"
    WIND = "wind"
    HYDRO = "hydro"
    GEOTHERMAL = "geothermal"
    BIOMASS = "biomass"
    OTHER = "other"

    @classmethod
    def values(cls):
        return [e.value for e in cls]


class ExecutionContext(BaseModel):
    """Invocation context supplied by the host for every operation"""
    model_config = ConfigDict(frozen=True)

    caller: str = Field(..., min_length=1, description="Identity of the calling account")
    block_height: int = Field(0, ge=0, description="Block height at execution time")


class TokenConfig(BaseModel):
    """Static token identity and ledger limits"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(default=settings.TOKEN_NAME)
    symbol: str = Field(default=settings.TOKEN_SYMBOL)
    decimals: int = Field(default=settings.TOKEN_DECIMALS, ge=0)
    max_supply: int = Field(default=settings.MAX_SUPPLY, gt=0)
    source_max_length: int = Field(default=settings.SOURCE_MAX_LENGTH, gt=0)

    @classmethod
    def from_settings(cls) -> "TokenConfig":
        return cls(
            name=settings.TOKEN_NAME,
            symbol=settings.TOKEN_SYMBOL,
            decimals=settings.TOKEN_DECIMALS,
            max_supply=settings.MAX_SUPPLY,
            source_max_length=settings.SOURCE_MAX_LENGTH,
        )


class TokenMetadata(BaseModel):
    """Public token identity"""
    name: str
    symbol: str
    decimals: int


class MintEvent(BaseModel):
    """Immutable provenance record for one issuance"""
    model_config = ConfigDict(frozen=True)

    minter: str = Field(..., description="Account that issued the units")
    recipient: str = Field(..., description="Account credited with the units")
    amount: int = Field(..., gt=0, description="Base units issued")
    source: str = Field(..., min_length=1, description="Energy source label")
    carbon_footprint: int = Field(..., description="Carbon footprint per base unit, may be negative")
    block_height: int = Field(..., ge=0, description="Block height of the issuance")

    @property
    def carbon(self) -> int:
        """Carbon contribution of this event to the running total"""
        return self.carbon_footprint * self.amount


class LedgerState(BaseModel):
    """Complete ledger state.

    Instances are never mutated; operations build a new state with
    ``model_copy(update=...)`` and fresh containers. Map lookups go through
    the accessor methods, which treat a missing key as zero or false.
    """
    model_config = ConfigDict(frozen=True)

    admin: str
    paused: bool = False
    minters: Dict[str, bool] = Field(default_factory=dict)
    blacklist: Dict[str, bool] = Field(default_factory=dict)
    balances: Dict[str, int] = Field(default_factory=dict)
    total_supply: int = Field(0, ge=0)
    supply_per_source: Dict[str, int] = Field(default_factory=dict)
    total_carbon: int = 0
    mint_events: Dict[int, MintEvent] = Field(default_factory=dict)
    next_mint_id: int = Field(0, ge=0)

    @field_validator("admin")
    def validate_admin(cls, v):
        """The admin slot is never empty or the null address"""
        if not v or v == NULL_ADDRESS:
            raise ValueError("Admin must be a non-null account")
        return v

    @classmethod
    def genesis(cls, admin: str) -> "LedgerState":
        """Empty ledger owned by ``admin``"""
        return cls(admin=admin)

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def is_minter(self, account: str) -> bool:
        return self.minters.get(account, False)

    def is_denied(self, account: str) -> bool:
        return self.blacklist.get(account, False)

    def source_supply(self, source: str) -> int:
        return self.supply_per_source.get(source, 0)

    def mint_event(self, mint_id: int) -> Optional[MintEvent]:
        if mint_id < 0 or mint_id >= self.next_mint_id:
            return None
        return self.mint_events.get(mint_id)


class MintNotification(BaseModel):
    """Emitted after a successful mint"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["mint"] = "mint"
    minter: str
    recipient: str
    amount: int
    source: str
    carbon_footprint: int = Field(..., alias="carbonFootprint")
    mint_id: int = Field(..., alias="mintId")


class BurnNotification(BaseModel):
    """Emitted after a successful burn"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["burn"] = "burn"
    burner: str
    amount: int


class TransferNotification(BaseModel):
    """Emitted after a successful transfer"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["transfer"] = "transfer"
    from_: str = Field(..., alias="from")
    to: str
    amount: int


class AdminTransferNotification(BaseModel):
    """Emitted after an admin override transfer"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["adminTransfer"] = "adminTransfer"
    admin: str
    from_: str = Field(..., alias="from")
    to: str
    amount: int


Notification = Union[
    MintNotification,
    BurnNotification,
    TransferNotification,
    AdminTransferNotification,
]
