from typing import TypedDict, Optional, List, Dict, Any

class ImportState(TypedDict, total=False):
    """State shape for the record import workflow."""
    action_key: str
    instance_key: Optional[str]
    customer_id: Optional[str]
    record_type: str                 # default type name or custom instance key
    is_custom: bool
    connection_id: Optional[str]
    cursor: Optional[str]            # cursor for the next page, None when done
    page: List[Dict[str, Any]]       # raw records of the current page
    pages_fetched: int
    records_count: int
    new_records_count: int
    existing_records_count: int
    success: bool
    error: Optional[str]             # "No connection found" soft failure
