"""Load the sample class roster into an empty database.

Classes are inserted first so their generated ids can be attached to the
children and observation logs that follow.
"""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from daycare.utils.db import batch_insert, get_engine, load_json_data

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_DATA_PATH = Path(__file__).parents[1] / "data" / "sample_data.json"


def insert_class(engine: Engine, class_data: dict[str, Any]) -> int:
    with engine.begin() as conn:
        result = conn.execute(
            text(
                "INSERT INTO classes (age, class_name) VALUES (:age, :class_name) RETURNING id"
            ),
            {"age": class_data["age"], "class_name": class_data["class_name"]},
        )
        return result.scalar_one()


def child_ids_by_name(engine: Engine, class_id: int) -> dict[str, int]:
    with engine.connect() as conn:
        rows = conn.execute(
            text("SELECT id, name FROM children WHERE class_id = :class_id"),
            {"class_id": class_id},
        )
        return {name: child_id for child_id, name in rows}


def seed(engine: Engine, data: dict[str, Any]) -> None:
    for class_data in data.get("classes", []):
        class_id = insert_class(engine, class_data)
        logger.info("Inserted class %s with id %d", class_data["class_name"], class_id)

        children = [
            {"name": child["name"], "birthdate": child["birthdate"], "class_id": class_id}
            for child in class_data.get("children", [])
        ]
        batch_insert(engine, "children", children)
        logger.info("Inserted %d children", len(children))

        ids = child_ids_by_name(engine, class_id)
        logs = [
            {
                "child_id": ids[log["child"]],
                "month": log["month"],
                "keywords": log["keywords"],
                "content": log["content"],
            }
            for log in class_data.get("observation_logs", [])
            if log["child"] in ids
        ]
        batch_insert(engine, "observation_logs", logs)


def main() -> None:
    try:
        engine = get_engine()
        logger.info("Loading sample data from %s", SAMPLE_DATA_PATH)
        data = load_json_data(SAMPLE_DATA_PATH)
        seed(engine, data)
        logger.info("Sample data loaded successfully")
    except Exception as e:
        logger.error("Failed to load sample data: %s", str(e))
        raise


if __name__ == "__main__":
    main()
