from .auth import User, ROLES, DEFAULT_ROLE
from .stores import Store
from .invoices import Invoice

__all__ = [
    'User', 'ROLES', 'DEFAULT_ROLE',
    'Store',
    'Invoice',
]
