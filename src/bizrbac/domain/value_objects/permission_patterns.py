"""Named permission sets for common gates.

A resource protects an area with ``gate.protect(PermissionPatterns.ORDER_WRITE)``
instead of spelling the permission list out; any-of is the usual mode.
"""


class PermissionPatterns:
    """Permission name tuples, grouped by business area."""

    USER_MANAGEMENT = ("users:create", "users:read", "users:update", "users:delete")
    USER_READ = ("users:read",)
    USER_WRITE = ("users:create", "users:update")

    CUSTOMER_MANAGEMENT = (
        "customers:create",
        "customers:read",
        "customers:update",
        "customers:delete",
    )
    CUSTOMER_READ = ("customers:read",)
    CUSTOMER_WRITE = ("customers:create", "customers:update")

    ORDER_MANAGEMENT = (
        "orders:create",
        "orders:read",
        "orders:update",
        "orders:delete",
        "orders:assign",
    )
    ORDER_READ = ("orders:read",)
    ORDER_WRITE = ("orders:create", "orders:update")
    ORDER_ASSIGN = ("orders:assign",)

    INVOICE_MANAGEMENT = (
        "invoices:create",
        "invoices:read",
        "invoices:update",
        "invoices:delete",
        "invoices:send",
    )
    INVOICE_READ = ("invoices:read",)
    INVOICE_WRITE = ("invoices:create", "invoices:update")
    INVOICE_SEND = ("invoices:send",)

    BUSINESS_MANAGEMENT = ("business:read", "business:update", "business:manage")
    BUSINESS_READ = ("business:read",)
    BUSINESS_SETTINGS = ("business:manage",)

    SYSTEM_SETTINGS = ("settings:read", "settings:update")
    REPORTS = ("reports:read", "reports:financial")

