"""
Network I/O for ManUp.

Modules
-------
http : module
    Retrying requests session and JSON document retrieval.

Public API
----------
get_json : function
    GET a URL and decode the JSON body, raising NetworkError on failure.
make_session : function
    Create a requests.Session with retry/backoff defaults.
"""

from .http import get_json, make_session

__all__ = ["get_json", "make_session"]
