from typing import Callable

from fastapi import HTTPException, status
from supabase import Client

from .supabase_client import get_supabase
from .xml_utils import Clock, utc_now


def get_client_factory() -> Callable[[], Client]:
    """
    XML routes resolve the client inside their own error boundary so that a
    broken configuration still ends in a plain-text 500.
    """
    return get_supabase


def get_client() -> Client:
    try:
        return get_supabase()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase client initialization failed",
        ) from exc


def get_clock() -> Clock:
    return utc_now
