"""
Standard API response helpers.

Provides consistent response formatting for success and error cases.

Example:
    from common.utils import success_response

    @router.get("/courts/{court_id}")
    async def get_court(court_id: str):
        court = await court_service.get_court(court_id)
        return success_response({"court": court})
"""

from typing import Any, Optional, Dict


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
    errors: Optional[list] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "COURT_NOT_FOUND")
        details: Additional error details
        errors: List of field errors (for validation errors)

    Returns:
        Dictionary with success=False and error info
    """
    error: Dict[str, Any] = {"message": message}

    if code:
        error["code"] = code

    if details is not None:
        error["details"] = details

    if errors:
        error["errors"] = errors

    return {"success": False, "error": error}


def paginated_response(
    items: list,
    total: int,
    limit: int = 20,
    offset: int = 0,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an offset-paginated success response.

    Args:
        items: Items for the current window
        total: Total number of matching items
        limit: Window size
        offset: Number of items skipped

    Returns:
        Dictionary with success=True, data and pagination metadata
    """
    response: Dict[str, Any] = {
        "success": True,
        "data": items,
        "pagination": {
            "limit": limit,
            "offset": offset,
            "total": total,
            "hasMore": offset + len(items) < total,
        },
    }

    if message:
        response["message"] = message

    return response
