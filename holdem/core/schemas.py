"""
Pydantic schemas for table configuration and agent decisions.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from holdem.core.rules import (
    ActionType,
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_MIN_BUY_IN,
    DEFAULT_MAX_PLAYERS, DEFAULT_MAX_INVALID_ACTIONS, MIN_PLAYERS, MAX_PLAYERS,
)


class TableConfig(BaseModel):
    """Configuration of a Texas Hold'em table."""
    min_buy_in: int = Field(gt=0, default=DEFAULT_MIN_BUY_IN)
    max_players: int = Field(ge=MIN_PLAYERS, le=MAX_PLAYERS, default=DEFAULT_MAX_PLAYERS)
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    limit: bool = Field(default=False, description="Fixed-limit betting (unsupported)")
    max_invalid_actions: int = Field(ge=1, default=DEFAULT_MAX_INVALID_ACTIONS)

    @model_validator(mode="after")
    def check_blinds(self) -> "TableConfig":
        if self.big_blind < self.small_blind:
            raise ValueError("big blind must be at least the small blind")
        return self


class ActionRequest(BaseModel):
    """A decision returned by an agent."""
    action: ActionType = Field(..., description="Action type: FOLD, CHECK, CALL, BET, RAISE, ALL_IN")
    amount: Optional[int] = Field(default=0, ge=0, description="Total amount for BET/RAISE actions")

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value
