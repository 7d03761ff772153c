from typing import Dict, Any
from graph.state import ImportState
from loguru import logger

UNNAMED_RECORD = "Unnamed record"

def normalize_record(raw: Dict[str, Any], customer_id: str, record_type: str) -> Dict[str, Any]:
    """Turn a raw action record into the stored record shape."""
    if not isinstance(raw, dict) or raw.get("id") is None:
        raise ValueError(f"Record without an id returned for {record_type}")

    record = dict(raw)
    record["id"] = str(raw["id"])
    record["name"] = raw.get("name") or record["id"] or UNNAMED_RECORD
    record["fields"] = raw.get("fields") or {}
    record["customerId"] = customer_id
    record["recordType"] = record_type
    return record

def make_persist(store):
    """Build the node that stores the current page, skipping known records."""

    def persist(state: ImportState) -> ImportState:
        page = state.get("page") or []
        new_count = 0

        for raw in page:
            record = normalize_record(raw, state["customer_id"], state["record_type"])
            if store.insert_if_absent(record):
                new_count += 1
                logger.debug(f"Saved new record {record['id']}")
            else:
                logger.debug(f"Record {record['id']} already exists, skipping...")

        state["records_count"] += len(page)
        state["new_records_count"] += new_count
        state["existing_records_count"] += len(page) - new_count
        state["page"] = []

        if page:
            logger.info(
                f"Processed {len(page)} records: {state['new_records_count']} new, "
                f"{state['existing_records_count']} existing"
            )
        return state

    return persist
