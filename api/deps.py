# api/deps.py
from fastapi import Header, HTTPException, status
from bookshelf.lending import ErrorKind, Rejection

REJECTION_STATUS = {
    ErrorKind.INVALID_ACTOR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

def get_actor_id(x_user_id: str = Header(..., description="Identifier of the signed-in user")) -> str:
    """Authentication is external; the gateway passes the signed-in user's id in X-User-Id."""
    if not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id")
    return x_user_id.strip()

def raise_for_rejection(rejection: Rejection) -> None:
    """Translate a lending rejection into an HTTP error."""
    raise HTTPException(
        status_code=REJECTION_STATUS[rejection.kind],
        detail={"kind": rejection.kind.value, "message": rejection.message}
    )
