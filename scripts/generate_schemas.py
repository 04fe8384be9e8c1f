# scripts/generate_schemas.py
import json
from pathlib import Path

from libs.domain.dto.errors import SafeErrorResponse

SCHEMAS_DIR = Path(__file__).parent.parent / "libs/domain/schemas/v1"
MODELS_TO_GENERATE = {
    "error_response.v1.json": SafeErrorResponse,
}


def generate_schemas():
    """
    Writes the JSON Schemas of the public response models (by alias, as sent on the wire).
    """
    print(f"Writing schemas to: {SCHEMAS_DIR}")
    SCHEMAS_DIR.mkdir(parents=True, exist_ok=True)

    for filename, model in MODELS_TO_GENERATE.items():
        schema_path = SCHEMAS_DIR / filename
        print(f"  -> {filename}")

        schema_content = model.model_json_schema(by_alias=True, mode="serialization")

        with open(schema_path, "w", encoding="utf-8") as f:
            json.dump(schema_content, f, ensure_ascii=False, indent=2)
            f.write("\n")

    print("Done.")


if __name__ == "__main__":
    generate_schemas()
