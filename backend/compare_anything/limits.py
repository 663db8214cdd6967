"""
CompareAnything Backend — Rate Limiting

Global per-IP limiter. Applied per-endpoint via decorator, registered on the app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
