"""
Seed Roles and Actions Script
Populates the roles, actions and role_permissions tables from the config.
Runs once: if any role already exists the script does nothing. To pick up
catalog changes on an existing database, grant new actions through the
/roles API instead.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.permissions_config import (
    ROLE_DEFINITIONS, PERMISSION_DEFINITIONS, expand_role_permissions, is_wildcard_role
)
from app.database.supabase_client import get_supabase_admin
from supabase import Client
import logging

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    roles: int = 0
    actions: int = 0
    grants: int = 0
    skipped: bool = False


def roles_exist(supabase: Client) -> bool:
    result = supabase.table("roles").select("id").limit(1).execute()
    return bool(result.data)


def seed_roles(supabase: Client) -> Dict[str, str]:
    """Insert the role catalog; returns name -> id"""
    result = supabase.table("roles").insert([
        {
            "name": role["name"],
            "description": role["description"],
            "is_active": True,
            "is_wildcard": is_wildcard_role(role["name"]),
        }
        for role in ROLE_DEFINITIONS
    ]).execute()
    logger.info(f"Inserted {len(result.data)} roles")
    return {row["name"]: row["id"] for row in result.data}


def seed_actions(supabase: Client) -> Dict[str, str]:
    """Insert the action catalog; returns name -> id"""
    result = supabase.table("actions").insert([
        {**definition, "is_active": True} for definition in PERMISSION_DEFINITIONS
    ]).execute()
    logger.info(f"Inserted {len(result.data)} actions")
    return {row["name"]: row["id"] for row in result.data}


def seed_role_permissions(supabase: Client, role_ids: Dict[str, str], action_ids: Dict[str, str]) -> int:
    """
    One grant row per (role, action) of the default table. The wildcard is
    expanded against the actions inserted in this run, so it covers the catalog
    as it stands now and nothing added later.
    """
    rows: List[Dict[str, object]] = []
    for role_name, role_id in role_ids.items():
        for action in expand_role_permissions(role_name, action_ids.keys()):
            rows.append({"role_id": role_id, "action_id": action_ids[action], "is_active": True})
    if not rows:
        return 0
    result = supabase.table("role_permissions").insert(rows).execute()
    logger.info(f"Inserted {len(result.data)} role permissions")
    return len(result.data)


def seed(supabase: Client) -> SeedResult:
    """Populate the catalog and default grants, or do nothing if roles already exist"""
    if roles_exist(supabase):
        logger.info("Roles already exist, skipping seed")
        return SeedResult(skipped=True)

    role_ids = seed_roles(supabase)
    action_ids = seed_actions(supabase)
    grants = seed_role_permissions(supabase, role_ids, action_ids)
    return SeedResult(roles=len(role_ids), actions=len(action_ids), grants=grants)


def main():
    """Main function to seed roles and actions"""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    try:
        supabase = get_supabase_admin()

        logger.info("Starting roles and actions seeding...")
        result = seed(supabase)

        if not result.skipped:
            logger.info("Seeding completed successfully!")
            logger.info(f"Total: {result.roles} roles, {result.actions} actions, {result.grants} grants")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
