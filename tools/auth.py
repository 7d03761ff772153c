from typing import NamedTuple, Optional

from fastapi import Request

AUTH_ID_HEADER = "x-auth-id"
CUSTOMER_NAME_HEADER = "x-customer-name"


class AuthContext(NamedTuple):
    customer_id: Optional[str]
    customer_name: Optional[str] = None


def get_auth(request: Request) -> AuthContext:
    """Read the tenant from request headers; customer_id is None when absent."""
    customer_id = (request.headers.get(AUTH_ID_HEADER) or "").strip() or None
    customer_name = request.headers.get(CUSTOMER_NAME_HEADER) or customer_id
    return AuthContext(customer_id=customer_id, customer_name=customer_name)
