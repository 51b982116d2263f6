# cob_scenes/core/domain/values.py
"""
Typed attribute values.

Every value that can appear on the right-hand side of a `key:value` pair in
an attribute block is one of the variants below. The union is discriminated
on the `kind` field so a consumer can dispatch exhaustively:

    Percent      100%
    Pixels       10px
    Number       120, 0.5, -3
    HexColor     #FF0000, #FF000080
    HslaColor    Hsla{hue:120 saturation:1.0 lightness:0.5 alpha:1.0}
    Token        Column, Center, true
    Text         "Hello, World!"
    StateValues  {idle:#FF0000 hover:#00FF00 press:#0000FF}
    MapValue     {x:1 y:2}
    StructValue  Border{top:1px bottom:1px}
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class InteractionState(str, Enum):
    """Interaction states a state-keyed value can vary over."""
    IDLE = "idle"
    HOVER = "hover"
    PRESS = "press"


INTERACTION_STATES: Tuple[str, ...] = tuple(s.value for s in InteractionState)


class _ValueModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Percent(_ValueModel):
    kind: Literal["percent"] = "percent"
    value: Union[int, float]


class Pixels(_ValueModel):
    kind: Literal["px"] = "px"
    value: Union[int, float]


class Number(_ValueModel):
    kind: Literal["number"] = "number"
    value: Union[int, float]


class HexColor(_ValueModel):
    """Color written as `#RRGGBB` or `#RRGGBBAA` (digits stored uppercase, no '#')."""
    kind: Literal["hex"] = "hex"
    hex: str = Field(..., pattern=r"^[0-9A-F]{6}([0-9A-F]{2})?$")

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        digits = self.hex if len(self.hex) == 8 else self.hex + "FF"
        return (
            int(digits[0:2], 16),
            int(digits[2:4], 16),
            int(digits[4:6], 16),
            int(digits[6:8], 16),
        )


class HslaColor(_ValueModel):
    kind: Literal["hsla"] = "hsla"
    hue: Union[int, float]
    saturation: Union[int, float]
    lightness: Union[int, float]
    alpha: Union[int, float] = 1.0


class Token(_ValueModel):
    """Enumerated keyword such as a layout direction (`Column`)."""
    kind: Literal["token"] = "token"
    name: str


class Text(_ValueModel):
    kind: Literal["text"] = "text"
    text: str


class StateValues(_ValueModel):
    """
    A value that varies by interaction state.

    `idle` is always present. `hover` and `press` are None when the source did
    not write them; `resolve()` then falls back to the idle value.
    """
    kind: Literal["states"] = "states"
    idle: "Value"
    hover: Optional["Value"] = None
    press: Optional["Value"] = None

    @property
    def declared(self) -> Tuple[str, ...]:
        return tuple(s for s in INTERACTION_STATES if getattr(self, s) is not None)

    def resolve(self, state: Union[InteractionState, str]) -> "Value":
        name = InteractionState(state).value
        value = getattr(self, name)
        return self.idle if value is None else value


class MapValue(_ValueModel):
    kind: Literal["map"] = "map"
    fields: Dict[str, "Value"] = Field(default_factory=dict)


class StructValue(_ValueModel):
    """Named structured value other than a color, e.g. `Border{top:1px}`."""
    kind: Literal["struct"] = "struct"
    name: str
    fields: Dict[str, "Value"] = Field(default_factory=dict)


Value = Annotated[
    Union[
        Percent,
        Pixels,
        Number,
        HexColor,
        HslaColor,
        Token,
        Text,
        StateValues,
        MapValue,
        StructValue,
    ],
    Field(discriminator="kind"),
]

StateValues.model_rebuild()
MapValue.model_rebuild()
StructValue.model_rebuild()


def state_values_from_fields(
    fields: Dict[str, Value],
    *,
    strict: bool,
) -> StateValues:
    """
    Build a StateValues from a `{state: value}` mapping.

    Raises ValueError when a key is not an interaction state, when `idle` is
    missing, or (in strict mode) when any state is missing. Callers wrap it
    into a located InvalidValue.
    """
    unknown = [k for k in fields if k not in INTERACTION_STATES]
    if unknown:
        raise ValueError(
            f"unknown interaction state(s) {', '.join(sorted(unknown))}; "
            f"expected {', '.join(INTERACTION_STATES)}"
        )
    if strict:
        missing = [s for s in INTERACTION_STATES if s not in fields]
        if missing:
            raise ValueError(f"state-keyed value is missing {', '.join(missing)}")
    elif InteractionState.IDLE.value not in fields:
        raise ValueError("state-keyed value must define 'idle'")
    return StateValues(
        idle=fields["idle"],
        hover=fields.get("hover"),
        press=fields.get("press"),
    )


__all__ = [
    "InteractionState",
    "INTERACTION_STATES",
    "Percent",
    "Pixels",
    "Number",
    "HexColor",
    "HslaColor",
    "Token",
    "Text",
    "StateValues",
    "MapValue",
    "StructValue",
    "Value",
    "state_values_from_fields",
]
