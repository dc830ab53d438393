# backend/tests/factories/utils.py

from typing import Dict, List, Sequence
from .tables import AreaFactory, TableFactory


def create_floor(
    capacities: Sequence[int] = (2, 4, 4, 6),
    area_names: Sequence[str] = ("Main Hall", "Terrace"),
) -> Dict:
    """
    Create areas and tables for testing.

    Tables are spread over the areas in turn, so with the defaults the
    first and third tables are in the main hall.

    Returns:
        Dict with the created ``areas`` and ``tables`` lists
    """
    areas = [AreaFactory(name=name) for name in area_names]

    tables: List = []
    for index, capacity in enumerate(capacities):
        tables.append(
            TableFactory(
                area=areas[index % len(areas)],
                table_number=str(index + 1),
                capacity=capacity,
            )
        )

    return {"areas": areas, "tables": tables}
