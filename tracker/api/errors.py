from fastapi import HTTPException

from tracker.core.logger import logger


def persistence_failure(action: str, e: Exception) -> HTTPException:
    """500 carrying a generic message plus the underlying store error."""
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return HTTPException(500, detail={"error": f"Failed to {action}", "details": str(e.__cause__ or e)})
