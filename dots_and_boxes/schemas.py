from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dots_and_boxes.game_state import Board
from dots_and_boxes.rule_engine import is_enclosed


class BoardModel(BaseModel):
    """
    Plain nested-array form of a board, as stored or sent over the wire.

    Validation enforces what the engine relies on: cell values in {0, 1, 2},
    rectangular and mutually consistent matrices, and a box being owned exactly
    when all four of its edges are drawn.
    """

    h_edges: List[List[int]]
    v_edges: List[List[int]]
    owners: List[List[int]]

    @field_validator("h_edges", "v_edges", "owners")
    @classmethod
    def _check_cells(cls, matrix: List[List[int]]) -> List[List[int]]:
        for row in matrix:
            for cell in row:
                if cell not in (0, 1, 2):
                    raise ValueError(f"cell values must be 0, 1 or 2, received {cell}")
        if len({len(row) for row in matrix}) > 1:
            raise ValueError("matrix rows must all have the same length")
        return matrix

    @model_validator(mode="after")
    def _check_shapes(self) -> "BoardModel":
        height = len(self.h_edges)
        if height < 1:
            raise ValueError("h_edges must have at least one row")
        width = len(self.h_edges[0]) + 1

        def shape(matrix: List[List[int]]) -> tuple:
            return len(matrix), (len(matrix[0]) if matrix else None)

        expected_v = (height - 1, width if height > 1 else None)
        expected_owners = (height - 1, width - 1 if height > 1 else None)
        if shape(self.v_edges) != expected_v:
            raise ValueError(f"v_edges shape {shape(self.v_edges)} does not match {expected_v}")
        if shape(self.owners) != expected_owners:
            raise ValueError(
                f"owners shape {shape(self.owners)} does not match {expected_owners}"
            )

        for r, row in enumerate(self.owners):
            for c, owner in enumerate(row):
                if owner and not is_enclosed(self.h_edges, self.v_edges, r, c):
                    raise ValueError(f"box ({r}, {c}) is owned but not enclosed")
                if not owner and is_enclosed(self.h_edges, self.v_edges, r, c):
                    raise ValueError(f"box ({r}, {c}) is enclosed but has no owner")
        return self

    def to_board(self) -> Board:
        return Board.from_lists(self.h_edges, self.v_edges, self.owners)


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player: Literal[1, 2]
    direction: Literal["H", "V"] = Field(..., alias="dir")
    row: int
    col: int


class NewGameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    width: Optional[int] = Field(
        default=None,
        ge=1,
        description="Dots across; falls back to the configured default.",
    )
    height: Optional[int] = Field(
        default=None,
        ge=1,
        description="Dots down; falls back to the configured default.",
    )
    player_names: Optional[Dict[int, str]] = Field(
        default=None,
        alias="playerNames",
        description="Display names keyed by player id.",
    )
