"""Generate JSON schemas from Pydantic models and save to schemas/ directory."""

import json
from pathlib import Path
from typing import List, Optional

from lineagewalk.api import DepthFirstResult, GridResult, LayersResult
from lineagewalk.kernel.options import TraversalOptions
from lineagewalk._internal.io.lineage_json import LineageResponse

SCHEMA_MODELS = {
    "lineage_response.schema.json": LineageResponse,
    "traversal_options.schema.json": TraversalOptions,
    "layers_result.schema.json": LayersResult,
    "depth_first_result.schema.json": DepthFirstResult,
    "grid_result.schema.json": GridResult,
}


def generate_schemas(schemas_dir: Optional[Path] = None) -> List[Path]:
    """Generate JSON schemas for all models."""
    if schemas_dir is None:
        schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for filename, model in SCHEMA_MODELS.items():
        schema_path = schemas_dir / filename
        with open(schema_path, 'w', encoding='utf-8') as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Generated: {schema_path}")
        written.append(schema_path)

    print("\nSchema generation complete!")
    return written


if __name__ == "__main__":
    generate_schemas()
