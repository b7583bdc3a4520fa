"""
Roles and Actions Configuration
This config defines the action catalog for every domain category and the default
permission set of each role. Used by the seed script, by registration-time role
provisioning and by route guards (permission-name constants).

Action names follow the "<operation>_<entity>" convention, e.g. "create_class".
"""

from typing import Dict, Iterable, List

OPERATIONS = ("create", "read", "update", "delete", "manage")

WILDCARD = "*"

PERMISSION_CATEGORIES = {
    "CLASSES": "classes",
    "CLASS_BOOKINGS": "class_bookings",
    "STUDIOS": "studios",
    "STUDIO_BOOKINGS": "studio_bookings",
    "GIGS": "gigs",
    "GIG_APPLICATIONS": "gig_applications",
    "USERS": "users",
    "SYSTEM": "system",
}

# category -> list of (operation, entity, table_name, description)
CATALOG = {
    "classes": [
        ("create", "class", "classes", "Create new dance classes"),
        ("read", "class", "classes", "View class details"),
        ("update", "class", "classes", "Edit class information"),
        ("delete", "class", "classes", "Cancel or delete classes"),
    ],
    "class_bookings": [
        ("create", "class_booking", "class_bookings", "Book a dance class"),
        ("read", "class_booking", "class_bookings", "View class bookings"),
        ("update", "class_booking", "class_bookings", "Modify class bookings"),
        ("delete", "class_booking", "class_bookings", "Cancel class bookings"),
    ],
    "studios": [
        ("create", "studio", "studios", "Create studio listings"),
        ("read", "studio", "studios", "View studio details"),
        ("update", "studio", "studios", "Edit studio information"),
        ("delete", "studio", "studios", "Remove studio listings"),
    ],
    "studio_bookings": [
        ("create", "studio_booking", "studio_bookings", "Rent studio space"),
        ("read", "studio_booking", "studio_bookings", "View studio rentals"),
        ("update", "studio_booking", "studio_bookings", "Modify studio rentals"),
        ("delete", "studio_booking", "studio_bookings", "Cancel studio rentals"),
    ],
    "gigs": [
        ("create", "gig", "gigs", "Create gig opportunities"),
        ("read", "gig", "gigs", "View gig details"),
        ("update", "gig", "gigs", "Edit gig information"),
        ("delete", "gig", "gigs", "Cancel gig opportunities"),
    ],
    "gig_applications": [
        ("create", "gig_application", "gig_applications", "Apply for gigs"),
        ("read", "gig_application", "gig_applications", "View gig applications"),
        ("update", "gig_application", "gig_applications", "Modify gig applications"),
        ("delete", "gig_application", "gig_applications", "Withdraw gig applications"),
    ],
    "users": [
        ("create", "user", "users", "Register new users"),
        ("read", "user", "users", "View user profiles"),
        ("update", "user", "users", "Edit user profiles"),
        ("delete", "user", "users", "Deactivate users"),
        ("manage", "user_roles", "user_roles", "Assign and revoke user roles"),
        ("read", "user_roles", "user_roles", "View user roles"),
    ],
    "system": [
        ("read", "audit_log", "audit_log", "View audit logs"),
        ("manage", "roles", "roles", "Create and manage roles"),
        ("manage", "permissions", "role_permissions", "Manage role permissions"),
        ("read", "analytics", "analytics", "View platform analytics"),
    ],
}


def action_name(operation: str, entity: str) -> str:
    return f"{operation}_{entity}"


def _build_permissions() -> Dict[str, Dict[str, str]]:
    """
    Returns nested constants keyed by upper-case category then upper-case operation,
    e.g. PERMISSIONS["CLASSES"]["CREATE"] == "create_class".
    Non-CRUD entries inside a category are keyed by "<OPERATION>_<ENTITY>".
    """
    permissions: Dict[str, Dict[str, str]] = {}
    for key, category in PERMISSION_CATEGORIES.items():
        group = {}
        base_entity = CATALOG[category][0][1]
        for operation, entity, _table, _description in CATALOG[category]:
            if category != "system" and entity == base_entity:
                group[operation.upper()] = action_name(operation, entity)
            else:
                group[f"{operation}_{entity}".upper()] = action_name(operation, entity)
        permissions[key] = group
    return permissions


def _build_definitions() -> List[Dict[str, str]]:
    definitions = []
    for category, entries in CATALOG.items():
        for operation, entity, table_name, description in entries:
            definitions.append({
                "name": action_name(operation, entity),
                "description": description,
                "category": category,
                "table_name": table_name,
                "operation": operation,
            })
    return definitions


PERMISSIONS = _build_permissions()
PERMISSION_DEFINITIONS = _build_definitions()
ALL_PERMISSIONS = [d["name"] for d in PERMISSION_DEFINITIONS]

_P = PERMISSIONS

ROLE_DEFINITIONS = [
    {"name": "student", "description": "Dance students who can book classes and studios"},
    {"name": "artist", "description": "Dance artists who can teach classes and apply for gigs"},
    {"name": "studio_owner", "description": "Studio owners who can rent out their spaces"},
    {"name": "admin", "description": "System administrators with full access"},
]

REGISTRABLE_ROLES = ("student", "artist", "studio_owner")

DEFAULT_ROLE_PERMISSIONS = {
    "student": [
        _P["CLASSES"]["READ"],
        _P["CLASS_BOOKINGS"]["CREATE"],
        _P["CLASS_BOOKINGS"]["READ"],
        _P["CLASS_BOOKINGS"]["UPDATE"],
        _P["CLASS_BOOKINGS"]["DELETE"],
        _P["STUDIOS"]["READ"],
        _P["STUDIO_BOOKINGS"]["CREATE"],
        _P["STUDIO_BOOKINGS"]["READ"],
        _P["STUDIO_BOOKINGS"]["UPDATE"],
        _P["STUDIO_BOOKINGS"]["DELETE"],
        _P["GIGS"]["READ"],
        _P["GIG_APPLICATIONS"]["CREATE"],
        _P["GIG_APPLICATIONS"]["READ"],
        _P["GIG_APPLICATIONS"]["UPDATE"],
        _P["GIG_APPLICATIONS"]["DELETE"],
        _P["USERS"]["READ"],
        _P["USERS"]["UPDATE"],
    ],
    "artist": [
        _P["CLASSES"]["CREATE"],
        _P["CLASSES"]["READ"],
        _P["CLASSES"]["UPDATE"],
        _P["CLASSES"]["DELETE"],
        _P["GIGS"]["CREATE"],
        _P["GIGS"]["READ"],
        _P["GIGS"]["UPDATE"],
        _P["GIGS"]["DELETE"],
    ],
    "studio_owner": [
        _P["STUDIOS"]["CREATE"],
        _P["STUDIOS"]["READ"],
        _P["STUDIOS"]["UPDATE"],
        _P["STUDIOS"]["DELETE"],
    ],
    "admin": [WILDCARD],
}


def is_wildcard_role(role_name: str) -> bool:
    return WILDCARD in DEFAULT_ROLE_PERMISSIONS.get(role_name, [])


def expand_role_permissions(role_name: str, catalog_names: Iterable[str]) -> List[str]:
    """
    Expand a role's default permission list against a concrete action catalog.
    The wildcard becomes every name in catalog_names; names missing from the
    catalog are dropped. Order follows the default list, duplicates removed.
    """
    catalog = list(catalog_names)
    known = set(catalog)
    expanded: List[str] = []
    for name in DEFAULT_ROLE_PERMISSIONS.get(role_name, []):
        candidates = catalog if name == WILDCARD else [name]
        for candidate in candidates:
            if candidate in known and candidate not in expanded:
                expanded.append(candidate)
    return expanded
