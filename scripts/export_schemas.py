"""Export JSON schemas for the engine's public input and output models."""

import json
from pathlib import Path

from roameo.core.models import (
    BudgetAllocation,
    FeasibilityResult,
    GuardResult,
    ReconciliationResult,
    TripRequest,
)


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in (TripRequest, FeasibilityResult, GuardResult, BudgetAllocation, ReconciliationResult):
        schema = model.model_json_schema()
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
