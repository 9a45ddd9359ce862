from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from photospot.services.auth_service import Viewer, resolve_viewer

bearer_scheme = HTTPBearer(auto_error=False)


async def get_viewer(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Viewer:
    """Current viewer; bad or missing credentials mean anonymous, never an error."""
    return resolve_viewer(credentials.credentials if credentials else None)
