from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: the employee a punch is recorded for.

    Note: Read-only view; employee CRUD lives outside this package.
    """

    employee_id: int
    employee_code: str
    full_name: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True
