from typing import NamedTuple, Optional, Tuple

FETCH_PREFIX = "get-"
CUSTOM_OBJECTS_ACTION = "get-objects"


class RecordAction(NamedTuple):
    """A default record action configured on the integration platform."""
    key: str            # action key on Integration.app, e.g. "get-equipment"
    name: str           # display label
    record_type: str    # type stamped on imported records


RECORD_ACTIONS: Tuple[RecordAction, ...] = (
    RecordAction(key="get-equipment", name="Equipment", record_type="equipment"),
    RecordAction(key="get-contacts", name="Contacts", record_type="contacts"),
    RecordAction(key="get-companies", name="Companies", record_type="companies"),
)

DEFAULT_RECORD_TYPES = {action.record_type: action for action in RECORD_ACTIONS}


def strip_fetch_prefix(key: str) -> str:
    """Drop the "get-" prefix from an action key, if present."""
    if key.startswith(FETCH_PREFIX):
        return key[len(FETCH_PREFIX):]
    return key


def classify_action(action_key: str) -> Optional[RecordAction]:
    """
    Classify an action key.

    Returns the matching default RecordAction, or None when the action is a
    custom-object action that needs an instance key. Only "get-" actions can
    be default actions.
    """
    if not (action_key or "").startswith(FETCH_PREFIX):
        return None
    return DEFAULT_RECORD_TYPES.get(strip_fetch_prefix(action_key))


def is_custom_action(action_key: str) -> bool:
    return classify_action(action_key) is None


def is_default_record_type(record_type: str) -> bool:
    """Accepts both "contacts" and the prefixed "get-contacts" form."""
    return strip_fetch_prefix(record_type or "") in DEFAULT_RECORD_TYPES


def resolve_record_type(action_key: str, instance_key: Optional[str] = None) -> Optional[str]:
    """Record type stamped on records imported by this action."""
    action = classify_action(action_key)
    if action:
        return action.record_type
    return instance_key or None
