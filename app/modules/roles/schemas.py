from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Literal
from datetime import datetime

from app.config.permissions_config import OPERATIONS

Operation = Literal[OPERATIONS]


class ActionCreate(BaseModel):
    name: str = Field(..., pattern=r"^[a-z]+_[a-z_]+$", max_length=100)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    table_name: Optional[str] = None
    operation: Operation

    @model_validator(mode="after")
    def name_is_operation_and_entity(self):
        entity = self.name[len(self.operation) + 1:]
        if not self.name.startswith(f"{self.operation}_") or not entity.strip("_"):
            raise ValueError(f"name must be '{self.operation}_<entity>'")
        return self


class ActionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    table_name: Optional[str] = None
    operation: str
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None


class RoleResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    is_wildcard: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleWithActionsResponse(RoleResponse):
    actions: List[ActionResponse]


class RolePermissionAssign(BaseModel):
    action_id: str


class RolePermissionResponse(BaseModel):
    id: str
    role_id: str
    action_id: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserRoleAssign(BaseModel):
    role_id: str
    notes: Optional[str] = None


class UserRoleResponse(BaseModel):
    id: str
    user_id: str
    role_id: str
    role_name: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_at: datetime
    is_active: bool
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class UserPermissionsResponse(BaseModel):
    user_id: str
    roles: List[str]
    permissions: List[str]
