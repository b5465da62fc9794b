"""LocalMart customer storefront.

Backend-for-frontend for the marketplace storefront: product browsing,
customer registration and login, the customer dashboard, and the
privileged customer provisioning endpoint, all backed by the hosted
database-and-auth platform.
"""

__version__ = "0.1.0"
