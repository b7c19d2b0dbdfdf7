import logging
import traceback
from functools import wraps
from typing import Callable

from fastapi import HTTPException, status

from jobtrack_backend.modules.errors import NotFoundOrDeniedError, UnauthorizedError

logger = logging.getLogger(__name__)


def handle_endpoint_errors(func: Callable):
    """Decorator to map domain errors of HTTP endpoints onto status codes"""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            result = await func(*args, **kwargs)
            # Return empty dict for None responses
            if result is None:
                return {}
            return result
        except HTTPException:
            # Re-raise HTTP exceptions as they're already properly formatted
            raise
        except UnauthorizedError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
                headers={"WWW-Authenticate": "Bearer"}
            )
        except NotFoundOrDeniedError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        except (KeyError, ValueError) as e:
            # Handle missing required fields and validation errors as 400
            logger.error(str(e))
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {str(e)}")
            logger.error(f"Error details: {traceback.format_exc()}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return wrapper
