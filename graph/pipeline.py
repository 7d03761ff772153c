import os
import time
from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, START, END
from loguru import logger

from graph.state import ImportState
from graph.nodes.validate import validate
from graph.nodes.connect import make_connect, has_connection
from graph.nodes.fetch import make_fetch, has_more_pages
from graph.nodes.persist import make_persist
from tools.errors import InternalError, InvalidRequest, Unauthorized

DEFAULT_MAX_PAGES = 500


class ImportPipeline:
    """
    Paginated record import.

    Runs an Integration.app list action page by page for one customer and
    stores every record that is not already known for that customer and
    record type.
    """

    def __init__(self, client, store, max_pages: Optional[int] = None):
        self.client = client
        self.store = store
        if max_pages is None:
            max_pages = int(os.getenv("IMPORT_MAX_PAGES", str(DEFAULT_MAX_PAGES)))
        if max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")
        self.max_pages = max_pages
        self.graph = self._build_workflow()

    def _build_workflow(self):
        """Build the import workflow: validate -> connect -> (fetch -> persist)*."""
        workflow = StateGraph(ImportState)

        workflow.add_node("validate", validate)
        workflow.add_node("connect", make_connect(self.client))
        workflow.add_node("fetch", make_fetch(self.client, self.max_pages))
        workflow.add_node("persist", make_persist(self.store))

        workflow.add_edge(START, "validate")
        workflow.add_edge("validate", "connect")
        workflow.add_conditional_edges("connect", has_connection, {"fetch": "fetch", "done": END})
        workflow.add_edge("fetch", "persist")
        workflow.add_conditional_edges("persist", has_more_pages, {"fetch": "fetch", "done": END})

        return workflow.compile()

    def _recursion_limit(self) -> int:
        # validate + connect + fetch/persist per page, with room for the page cap check
        return 2 * self.max_pages + 5

    def run(self, action_key: Optional[str], instance_key: Optional[str], customer_id: Optional[str]) -> Dict[str, Any]:
        """
        Import all records of an action for a customer.

        Args:
            action_key: Integration.app action key, e.g. "get-equipment"
            instance_key: Custom object instance key, required for custom actions
            customer_id: Authenticated tenant

        Returns:
            Summary with recordsCount, newRecordsCount and existingRecordsCount,
            or {"success": False, "error": "No connection found"}

        Raises:
            Unauthorized, InvalidRequest: before any external call
            InternalError: on any failure while importing; pages stored
                before the failure are kept
        """
        start_time = time.time()
        initial_state: ImportState = {
            "action_key": action_key,
            "instance_key": instance_key,
            "customer_id": customer_id,
        }

        try:
            result = self.graph.invoke(initial_state, config={"recursion_limit": self._recursion_limit()})
        except (Unauthorized, InvalidRequest):
            raise
        except Exception as e:
            logger.exception(f"Error in import of {action_key} for {customer_id}: {e}")
            raise InternalError(f"Import failed: {e}") from e

        if result.get("success") is False:
            return {"success": False, "error": result.get("error")}

        processing_time = time.time() - start_time
        logger.info(
            f"Import completed in {processing_time:.2f}s. "
            f"Total records processed: {result['records_count']}, "
            f"New: {result['new_records_count']}, Existing: {result['existing_records_count']}"
        )

        return {
            "success": True,
            "recordsCount": result["records_count"],
            "newRecordsCount": result["new_records_count"],
            "existingRecordsCount": result["existing_records_count"],
        }
